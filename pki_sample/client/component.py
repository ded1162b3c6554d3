"""
Componente de certificados para o cliente sem navegador.

Tem o mesmo contrato do Web PKI usado pelas páginas (init, listCertificates,
readCertificate, signData), mas as chaves vêm de arquivos PEM/DER ou PKCS#12
carregados pelo pyHanko.
"""
import logging
from dataclasses import dataclass

from pyhanko.sign.signers import SimpleSigner

from ..errors import ComponentError
from ..onpremises import display_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CertificateListItem:
    thumbprint: str
    subject_name: str
    issuer_name: str


class CertificateComponent:
    async def init(self):
        pass

    async def list_certificates(self) -> list[CertificateListItem]:
        raise NotImplementedError

    async def read_certificate(self, thumbprint: str) -> bytes:
        raise NotImplementedError

    async def sign_data(self, thumbprint: str, data: bytes, digest_algorithm: str) -> bytes:
        raise NotImplementedError


class FileCertificateComponent(CertificateComponent):
    def __init__(self, key_pairs=(), pkcs12_files=(), passphrase: bytes | None = None):
        self.key_pairs = list(key_pairs)
        self.pkcs12_files = list(pkcs12_files)
        self.passphrase = passphrase
        self._signers = None

    async def init(self):
        try:
            self._signers = self._load_signers()
        except (OSError, ValueError, TypeError) as e:
            raise ComponentError(f"falha ao carregar os certificados: {e}") from e
        logger.debug("%d certificados carregados", len(self._signers))

    def _load_signers(self):
        signers = {}
        for key_file, cert_file in self.key_pairs:
            signer = SimpleSigner.load(key_file, cert_file, key_passphrase=self.passphrase)
            if signer is None:
                raise ComponentError(f"não foi possível carregar a chave {key_file} / certificado {cert_file}")
            signers[signer.signing_cert.sha1.hex()] = signer
        for pfx_file in self.pkcs12_files:
            signer = SimpleSigner.load_pkcs12(pfx_file, passphrase=self.passphrase)
            if signer is None:
                raise ComponentError(f"não foi possível carregar o arquivo PKCS#12 {pfx_file}")
            signers[signer.signing_cert.sha1.hex()] = signer
        if not signers:
            raise ComponentError("nenhum certificado configurado")
        return signers

    def _signer(self, thumbprint):
        if self._signers is None:
            raise ComponentError("componente não inicializado")
        try:
            return self._signers[thumbprint]
        except KeyError:
            raise ComponentError(f"certificado {thumbprint} não encontrado") from None

    async def list_certificates(self):
        if self._signers is None:
            raise ComponentError("componente não inicializado")
        return [
            CertificateListItem(
                thumbprint=thumbprint,
                subject_name=display_name(signer.signing_cert.subject),
                issuer_name=display_name(signer.signing_cert.issuer),
            )
            for thumbprint, signer in self._signers.items()
        ]

    async def read_certificate(self, thumbprint):
        return self._signer(thumbprint).signing_cert.dump()

    async def sign_data(self, thumbprint, data, digest_algorithm):
        signer = self._signer(thumbprint)
        try:
            return await signer.async_sign_raw(data, digest_algorithm)
        except (ValueError, NotImplementedError) as e:
            raise ComponentError(f"falha ao assinar com {thumbprint}: {e}") from e
