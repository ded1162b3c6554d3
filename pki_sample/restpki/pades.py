import base64
import logging
import os

from ..errors import UpstreamError
from .certificate import PKCertificate

logger = logging.getLogger(__name__)

# identificadores publicados pelo REST PKI
PADES_BASIC_POLICY_ID = "78d20b33-014d-440e-ad07-929f05183952"
PKI_BRAZIL_SECURITY_CONTEXT_ID = "201856ca-7b4e-4e43-9e05-9b0d6e0bc7a1"


class PadesSignatureStarter:
    """
    Inicia uma assinatura PAdES no REST PKI e devolve o token da tentativa.

    O token identifica uma única tentativa: uma nova tentativa exige um novo
    ``start_with_webpki()``.
    """

    def __init__(self, client):
        self.client = client
        self.pdf_to_sign = None
        self.signature_policy_id = None
        self.security_context_id = None
        self.visual_representation = None
        self.callback_argument = None

    def set_pdf_to_sign(self, source):
        """Aceita bytes, um caminho no disco ou um objeto de arquivo."""
        if isinstance(source, (bytes, bytearray)):
            self.pdf_to_sign = bytes(source)
        elif isinstance(source, (str, os.PathLike)):
            with open(source, "rb") as f:
                self.pdf_to_sign = f.read()
        elif hasattr(source, "read"):
            self.pdf_to_sign = source.read()
        else:
            raise TypeError(f"fonte de PDF não suportada: {type(source).__name__}")

    def _request_model(self):
        if not self.pdf_to_sign:
            raise ValueError("o PDF a assinar não foi informado")
        if not self.signature_policy_id:
            raise ValueError("a política de assinatura não foi informada")

        model = {
            "pdfToSign": base64.b64encode(self.pdf_to_sign).decode(),
            "signaturePolicyId": self.signature_policy_id,
            "securityContextId": self.security_context_id,
            "callbackArgument": self.callback_argument,
        }
        if self.visual_representation is not None:
            model["visualRepresentation"] = self.visual_representation.to_model(self.client)
        return model

    def start_with_webpki(self) -> str:
        response = self.client.post("Api/PadesSignatures", self._request_model())
        token = (response or {}).get("token")
        if not token:
            raise UpstreamError("o REST PKI não retornou um token de assinatura")
        logger.info("assinatura PAdES iniciada")
        return token


class PadesSignatureFinisher:
    def __init__(self, client):
        self.client = client
        self.token = None
        self._certificate_info = None
        self._done = False

    def finish(self) -> bytes:
        if not self.token:
            raise ValueError("o token da assinatura não foi informado")

        response = self.client.post(
            f"Api/PadesSignatures/{self.token}/Finalize", token_scoped=True
        ) or {}
        signed_pdf = response.get("signedPdf")
        if not signed_pdf:
            raise UpstreamError("o REST PKI não retornou o PDF assinado")

        self._certificate_info = PKCertificate.from_model(response.get("certificate"))
        self._done = True
        return base64.b64decode(signed_pdf)

    @property
    def certificate_info(self) -> PKCertificate:
        if not self._done:
            raise RuntimeError("certificate_info só está disponível após finish()")
        return self._certificate_info
