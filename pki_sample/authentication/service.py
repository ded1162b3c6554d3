import base64

from ..onpremises import display_name
from ..utils import b64decode_field


def start_authentication_logic(authentication) -> str:
    """Lógica do GET /api/authentication: nonce novo, em base64."""
    nonce = authentication.start()
    return base64.b64encode(nonce).decode()


def complete_authentication_logic(authentication, body: dict) -> dict:
    """
    Lógica do POST /api/authentication.
    Espera certificate, nonce e signature em base64 e retorna o resultado no
    formato {success, message, validationResults?}.
    """
    certificate = b64decode_field(body, "certificate")
    nonce = b64decode_field(body, "nonce")
    signature = b64decode_field(body, "signature")

    result = authentication.complete(nonce, certificate, signature)

    if not result.success:
        return {
            "success": False,
            "message": "Falha na autenticação: o certificado ou a assinatura não foram aceitos.",
            "validationResults": str(result.validation_results),
        }

    # uma aplicação real registraria o usuário como autenticado aqui
    cert = result.certificate
    subject = display_name(cert.subject)
    issuer = display_name(cert.issuer)
    email = cert.subject.native.get("email_address")
    message = f"Autenticado como {subject} (emitido por {issuer})"
    if email:
        message += f", e-mail: {email}"
    return {"success": True, "message": message}
