import uuid
from pathlib import Path

from werkzeug.utils import secure_filename

from ..restpki import (
    PadesSignatureFinisher,
    PadesSignatureStarter,
    VisualImage,
    VisualRepresentation,
    VisualText,
    sample_positioning,
)


def build_visual_representation(text: str, stamp_content: bytes, positioning_sample: int):
    """
    Texto com os marcadores {{signerName}} e {{signerNationalId}} (substituídos
    pelo REST PKI conforme o certificado), imagem do carimbo e posição.
    """
    return VisualRepresentation(
        text=VisualText(text, include_signing_time=True),
        image=VisualImage(stamp_content, "image/png"),
        position=sample_positioning(positioning_sample),
    )


def resolve_userfile(temp_folder, userfile: str) -> Path:
    """Arquivo gravado anteriormente pela página de upload."""
    name = secure_filename(userfile)
    path = Path(temp_folder) / name
    if not name or name != userfile or not path.is_file():
        raise FileNotFoundError(userfile)
    return path


def start_signature_logic(client, pdf_source, policy_id: str, security_context_id: str,
                          visual_representation=None) -> str:
    """
    Lógica do GET /pades-signature.
    Retorna o token (uso único) que a página entrega ao Web PKI.
    """
    starter = PadesSignatureStarter(client)
    starter.set_pdf_to_sign(pdf_source)
    starter.signature_policy_id = policy_id
    starter.security_context_id = security_context_id
    starter.visual_representation = visual_representation
    return starter.start_with_webpki()


def finish_signature_logic(client, token: str, temp_folder):
    """
    Lógica do POST /pades-signature.
    Retorna (filename, signer_cert); o PDF assinado fica em temp_folder/filename.
    """
    finisher = PadesSignatureFinisher(client)
    finisher.token = token
    signed_pdf = finisher.finish()
    signer_cert = finisher.certificate_info

    # numa aplicação real o PDF iria para o banco de dados
    filename = f"{uuid.uuid4()}.pdf"
    (Path(temp_folder) / filename).write_bytes(signed_pdf)
    return filename, signer_cert
