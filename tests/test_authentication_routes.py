import base64
import os
import time

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.x509.oid import NameOID

from .conftest import ISSUER_NAME, SUBJECT_NAME, _issue, _new_key


def b64(data):
    return base64.b64encode(data).decode()


def start(client):
    response = client.get("/api/authentication")
    assert response.status_code == 200
    return base64.b64decode(response.get_json())


def complete(client, certificate, nonce, signature):
    return client.post("/api/authentication", json={
        "certificate": b64(certificate),
        "nonce": b64(nonce),
        "signature": b64(signature),
    })


def test_page(client):
    response = client.get("/authentication")
    assert response.status_code == 200
    assert b"certificateSelect" in response.data


def test_start_returns_fresh_nonce(client):
    response = client.get("/api/authentication")
    assert response.headers["Cache-Control"] == "no-store"
    first = base64.b64decode(response.get_json())
    assert len(first) == 16
    assert start(client) != first


def test_successful_authentication(client, pki):
    nonce = start(client)
    response = complete(client, pki.user.der, nonce, pki.user.sign(nonce))

    assert response.status_code == 200
    body = response.get_json()
    assert body["success"] is True
    assert SUBJECT_NAME in body["message"]
    assert "validationResults" not in body


def test_tampered_signature(client, pki):
    nonce = start(client)
    signature = bytearray(pki.user.sign(nonce))
    signature[0] ^= 0x01

    body = complete(client, pki.user.der, nonce, bytes(signature)).get_json()

    assert body["success"] is False
    assert body["message"]
    assert body["validationResults"]


def test_untrusted_certificate(client, pki):
    nonce = start(client)
    body = complete(client, pki.rogue.der, nonce, pki.rogue.sign(nonce)).get_json()
    assert body["success"] is False
    assert "cadeia" in body["validationResults"]


def test_nonce_is_single_use(client, pki):
    nonce = start(client)
    signature = pki.user.sign(nonce)
    assert complete(client, pki.user.der, nonce, signature).get_json()["success"] is True

    response = complete(client, pki.user.der, nonce, signature)
    assert response.status_code == 400
    assert response.get_json()["success"] is False
    assert response.get_json()["errorKind"] == "InvalidToken"


def test_never_issued_nonce(client, pki):
    nonce = b"\x01" * 16
    response = complete(client, pki.user.der, nonce, pki.user.sign(nonce))
    assert response.status_code == 400
    assert response.get_json()["success"] is False


@pytest.mark.parametrize("body", [
    None,
    {"certificate": "AAAA", "nonce": "AAAA"},
    {"certificate": "***", "nonce": "AAAA", "signature": "AAAA"},
])
def test_malformed_requests(client, body):
    if body is None:
        response = client.post("/api/authentication", data="x", content_type="text/plain")
    else:
        response = client.post("/api/authentication", json=body)
    assert response.status_code == 400
    assert response.get_json()["success"] is False


def test_malformed_request_does_not_burn_nonce(client, pki):
    nonce = start(client)
    client.post("/api/authentication", json={"nonce": b64(nonce), "signature": "AAAA"})
    assert complete(client, pki.user.der, nonce, pki.user.sign(nonce)).get_json()["success"] is True


def test_certificate_without_common_name(client, pki):
    # PJ sem CN: somente O e serialNumber
    key = _new_key()
    subject = x509.Name([
        x509.NameAttribute(NameOID.ORGANIZATION_NAME, "Acme Ltda"),
        x509.NameAttribute(NameOID.SERIAL_NUMBER, "12345678909"),
    ])
    cert = _issue(subject, pki.ca.cert.subject, pki.ca.key, key.public_key(), is_ca=False)
    der = cert.public_bytes(serialization.Encoding.DER)

    nonce = start(client)
    signature = key.sign(nonce, padding.PKCS1v15(), hashes.SHA256())
    body = complete(client, der, nonce, signature).get_json()

    assert body["success"] is True
    assert "Acme Ltda" in body["message"]
    assert "None" not in body["message"]
    assert ISSUER_NAME in body["message"]


def test_abandoned_nonces_are_removed(client, temp_folder):
    for _ in range(20):
        start(client)
    nonces = temp_folder / "nonces"
    old = time.time() - 3600
    for path in nonces.glob("*.nonce"):
        os.utime(path, (old, old))

    for _ in range(3):
        start(client)

    assert len(list(nonces.glob("*.nonce"))) == 3
