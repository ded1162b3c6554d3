from dataclasses import dataclass
from pathlib import Path

from flask import current_app
from pyhanko.keys.pemder import load_cert_from_pemder
from pyhanko_certvalidator import ValidationContext

from .onpremises import CertificateAuthentication, FileNonceStore
from .restpki import RestPkiClient

EXTENSION_KEY = "pki_sample"


@dataclass
class Extensions:
    rest_pki: RestPkiClient
    authentication: CertificateAuthentication
    temp_folder: Path


def build_validation_context(app):
    root_path = app.config.get("ROOT_CERT_PATH")
    allow_fetching = app.config.get("ALLOW_FETCHING", True)
    if root_path:
        root_cert = load_cert_from_pemder(root_path)
        return ValidationContext(trust_roots=[root_cert], allow_fetching=allow_fetching)
    return ValidationContext(trust_roots=[], allow_fetching=allow_fetching)


def init_extensions(app, validation_context=None, rest_pki=None):
    temp_folder = Path(app.config["TEMP_FOLDER"])
    temp_folder.mkdir(parents=True, exist_ok=True)

    if rest_pki is None:
        rest_pki = RestPkiClient(
            app.config["REST_PKI_ENDPOINT"],
            app.config["REST_PKI_ACCESS_TOKEN"],
            timeout=app.config.get("REST_PKI_TIMEOUT", 30),
        )
    if validation_context is None:
        validation_context = build_validation_context(app)

    nonce_store = FileNonceStore(temp_folder / "nonces", ttl_seconds=app.config.get("NONCE_TTL", 300))
    authentication = CertificateAuthentication(
        validation_context, nonce_store,
        digest_algorithm=app.config.get("DIGEST_ALGORITHM", "sha256"),
    )
    app.extensions[EXTENSION_KEY] = Extensions(rest_pki, authentication, temp_folder)


def get_extensions() -> Extensions:
    return current_app.extensions[EXTENSION_KEY]
