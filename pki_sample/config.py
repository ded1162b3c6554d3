import os
import tempfile
from pathlib import Path

from .restpki import PADES_BASIC_POLICY_ID, PKI_BRAZIL_SECURITY_CONTEXT_ID

PACKAGE_DIR = Path(__file__).resolve().parent


def _bool(value, default=False):
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    REST_PKI_ENDPOINT = os.getenv("REST_PKI_ENDPOINT", "https://pki.rest/")
    REST_PKI_ACCESS_TOKEN = os.getenv("REST_PKI_ACCESS_TOKEN", "")
    REST_PKI_TIMEOUT = float(os.getenv("REST_PKI_TIMEOUT", 30))

    SIGNATURE_POLICY_ID = os.getenv("SIGNATURE_POLICY_ID", PADES_BASIC_POLICY_ID)
    SECURITY_CONTEXT_ID = os.getenv("SECURITY_CONTEXT_ID", PKI_BRAZIL_SECURITY_CONTEXT_ID)
    # exemplos 1-6, ver restpki.visual.sample_positioning
    VISUAL_POSITIONING_SAMPLE = int(os.getenv("VISUAL_POSITIONING_SAMPLE", 4))
    VISUAL_TEXT = "Assinado por {{signerName}} ({{signerNationalId}})"

    TEMP_FOLDER = os.getenv("TEMP_FOLDER", str(Path(tempfile.gettempdir()) / "pki_sample"))
    SAMPLE_DOC_PATH = os.getenv("SAMPLE_DOC_PATH", str(PACKAGE_DIR / "static" / "sample" / "SampleDocument.pdf"))
    PDF_STAMP_PATH = os.getenv("PDF_STAMP_PATH", str(PACKAGE_DIR / "static" / "sample" / "PdfStamp.png"))

    ROOT_CERT_PATH = os.getenv("ROOT_CERT_PATH")
    ALLOW_FETCHING = _bool(os.getenv("ALLOW_FETCHING"), default=True)
    NONCE_TTL = int(os.getenv("NONCE_TTL", 300))
    DIGEST_ALGORITHM = "sha256"

    MAX_CONTENT_LENGTH = int(os.getenv("MAX_CONTENT_LENGTH", 16 * 1024 * 1024))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
