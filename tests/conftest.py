import datetime
from dataclasses import dataclass
from pathlib import Path

import pytest
from asn1crypto import x509 as asn1_x509
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.x509.oid import NameOID
from pyhanko_certvalidator import ValidationContext

from pki_sample import create_app
from pki_sample.config import Config

REST_PKI_URL = "https://restpki.test/"
SUBJECT_NAME = "Alan Mathison Turing"
ISSUER_NAME = "Lacuna Test CA"


@dataclass
class Identity:
    key: rsa.RSAPrivateKey
    cert: x509.Certificate
    key_path: Path
    cert_path: Path

    @property
    def der(self) -> bytes:
        return self.cert.public_bytes(serialization.Encoding.DER)

    @property
    def asn1(self):
        return asn1_x509.Certificate.load(self.der)

    def sign(self, data: bytes) -> bytes:
        return self.key.sign(data, padding.PKCS1v15(), hashes.SHA256())


@dataclass
class SamplePki:
    ca: Identity
    user: Identity
    rogue: Identity

    def validation_context(self):
        return ValidationContext(trust_roots=[self.ca.asn1], allow_fetching=False)


def _name(common_name, email=None):
    attrs = [x509.NameAttribute(NameOID.COMMON_NAME, common_name)]
    if email:
        attrs.append(x509.NameAttribute(NameOID.EMAIL_ADDRESS, email))
    return x509.Name(attrs)


def _issue(subject, issuer_name, issuer_key, public_key, is_ca):
    now = datetime.datetime.now(datetime.timezone.utc)
    return (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(issuer_name)
        .public_key(public_key)
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(days=1))
        .not_valid_after(now + datetime.timedelta(days=30))
        .add_extension(x509.BasicConstraints(ca=is_ca, path_length=None), critical=True)
        .add_extension(
            x509.KeyUsage(
                digital_signature=not is_ca, content_commitment=False,
                key_encipherment=False, data_encipherment=False,
                key_agreement=False, key_cert_sign=is_ca, crl_sign=is_ca,
                encipher_only=False, decipher_only=False,
            ),
            critical=True,
        )
        .add_extension(x509.SubjectKeyIdentifier.from_public_key(public_key), critical=False)
        .add_extension(
            x509.AuthorityKeyIdentifier.from_issuer_public_key(issuer_key.public_key()),
            critical=False,
        )
        .sign(issuer_key, hashes.SHA256())
    )


def _identity(folder, label, key, cert):
    key_path = folder / f"{label}.key.pem"
    cert_path = folder / f"{label}.cert.pem"
    key_path.write_bytes(key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ))
    cert_path.write_bytes(cert.public_bytes(serialization.Encoding.PEM))
    return Identity(key, cert, key_path, cert_path)


def _new_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def pki(tmp_path_factory):
    folder = tmp_path_factory.mktemp("pki")

    ca_key = _new_key()
    ca_name = _name(ISSUER_NAME)
    ca_cert = _issue(ca_name, ca_name, ca_key, ca_key.public_key(), is_ca=True)

    user_key = _new_key()
    user_cert = _issue(
        _name(SUBJECT_NAME, "alan@example.com"), ca_name, ca_key,
        user_key.public_key(), is_ca=False,
    )

    # autoassinado, fora da cadeia confiável
    rogue_key = _new_key()
    rogue_name = _name("Mallory")
    rogue_cert = _issue(rogue_name, rogue_name, rogue_key, rogue_key.public_key(), is_ca=False)

    return SamplePki(
        ca=_identity(folder, "ca", ca_key, ca_cert),
        user=_identity(folder, "user", user_key, user_cert),
        rogue=_identity(folder, "rogue", rogue_key, rogue_cert),
    )


@pytest.fixture
def app(tmp_path, pki):
    class TestConfig(Config):
        TESTING = True
        TEMP_FOLDER = str(tmp_path / "temp")
        REST_PKI_ENDPOINT = REST_PKI_URL
        REST_PKI_ACCESS_TOKEN = "access-token"
        VISUAL_POSITIONING_SAMPLE = 4
        LOG_LEVEL = "DEBUG"

    return create_app(TestConfig, validation_context=pki.validation_context())


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def temp_folder(app):
    return Path(app.config["TEMP_FOLDER"])
