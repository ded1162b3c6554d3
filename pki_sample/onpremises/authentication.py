"""
Autenticação por certificado com desafio (nonce).

O servidor emite um nonce, o cliente o assina com a chave do certificado e
devolve certificado + nonce + assinatura. A verificação da assinatura é feita
pelo pyHanko e a confiança na cadeia pelo pyhanko-certvalidator, com o
``ValidationContext`` configurado na aplicação.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from asn1crypto import algos, x509
from cryptography.exceptions import InvalidSignature
from pyhanko.sign.validation.errors import SignatureValidationError
from pyhanko.sign.validation.utils import validate_raw
from pyhanko_certvalidator import CertificateValidator
from pyhanko_certvalidator.errors import PathBuildingError
from pyhanko_certvalidator.errors import ValidationError as PathCheckError

from ..utils import run_sync

logger = logging.getLogger(__name__)


@dataclass
class ValidationResults:
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    passed_checks: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def __str__(self):
        lines = []
        for title, items in (("Erros", self.errors),
                             ("Avisos", self.warnings),
                             ("Verificações aprovadas", self.passed_checks)):
            if items:
                lines.append(f"{title}:")
                lines.extend(f"  - {item}" for item in items)
        return "\n".join(lines)


@dataclass
class AuthenticationResult:
    certificate: Optional[x509.Certificate]
    validation_results: ValidationResults

    @property
    def success(self):
        return self.certificate is not None and self.validation_results.is_valid


def common_name(name: x509.Name) -> Optional[str]:
    return name.native.get("common_name") if name is not None else None


def display_name(name: x509.Name) -> str:
    # nem todo certificado tem CN (ex.: só O e serialNumber)
    return common_name(name) or name.human_friendly


def _signature_mechanism(cert: x509.Certificate, md_algorithm: str):
    key_algo = cert.public_key.algorithm
    if key_algo == "rsa":
        algo = f"{md_algorithm}_rsa"
    elif key_algo == "ec":
        algo = f"{md_algorithm}_ecdsa"
    elif key_algo in ("ed25519", "ed448"):
        algo = key_algo
    else:
        raise ValueError(f"algoritmo de chave não suportado: {key_algo}")
    return algos.SignedDigestAlgorithm({"algorithm": algo})


class CertificateAuthentication:
    def __init__(self, validation_context, nonce_store, digest_algorithm: str = "sha256"):
        self.validation_context = validation_context
        self.nonce_store = nonce_store
        self.digest_algorithm = digest_algorithm

    def start(self) -> bytes:
        return self.nonce_store.issue()

    async def async_complete(self, nonce: bytes, certificate: bytes, signature: bytes) -> AuthenticationResult:
        """
        Consome o nonce e valida a resposta do cliente.

        Levanta ``InvalidTokenError`` se o nonce não foi emitido por este
        serviço, expirou ou já foi usado. Problemas no certificado ou na
        assinatura não levantam exceção: aparecem em ``validation_results``.
        """
        self.nonce_store.consume(nonce)
        results = ValidationResults()

        try:
            cert = x509.Certificate.load(certificate)
            # asn1crypto decodifica sob demanda
            cert.native
        except (ValueError, TypeError) as e:
            results.errors.append(f"não foi possível decodificar o certificado: {e}")
            return AuthenticationResult(None, results)

        try:
            mechanism = _signature_mechanism(cert, self.digest_algorithm)
            validate_raw(signature, nonce, cert, mechanism, self.digest_algorithm)
            results.passed_checks.append("assinatura do nonce confere com o certificado")
        except InvalidSignature:
            results.errors.append("a assinatura do nonce não confere com o certificado")
        except (SignatureValidationError, ValueError) as e:
            results.errors.append(f"assinatura do nonce inválida: {e}")

        validator = CertificateValidator(cert, validation_context=self.validation_context)
        try:
            await validator.async_validate_usage({"digital_signature"})
            results.passed_checks.append("cadeia de certificação confiável")
        except (PathBuildingError, PathCheckError) as e:
            results.errors.append(f"cadeia de certificação não confiável: {e}")

        if results.is_valid:
            logger.info("autenticação aceita para %s", display_name(cert.subject))
        else:
            logger.info("autenticação recusada para %s", display_name(cert.subject))
        return AuthenticationResult(cert, results)

    def complete(self, nonce: bytes, certificate: bytes, signature: bytes) -> AuthenticationResult:
        return run_sync(self.async_complete(nonce, certificate, signature))
