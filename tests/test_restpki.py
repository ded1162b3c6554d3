import base64
import io

import pytest
import requests

from pki_sample.errors import InvalidTokenError, UpstreamError, ValidationError
from pki_sample.restpki import (
    PadesSignatureFinisher,
    PadesSignatureStarter,
    PKCertificate,
    RestPkiClient,
    sample_positioning,
    VisualRepresentation,
)

from .conftest import REST_PKI_URL

PDF = b"%PDF-1.4 exemplo"

CERTIFICATE_MODEL = {
    "subjectName": {"commonName": "Alan Mathison Turing"},
    "issuerName": {"commonName": "Lacuna Test CA"},
    "emailAddress": "alan@example.com",
    "serialNumber": "1234",
    "validityStart": "2024-01-01T00:00:00Z",
    "validityEnd": "2027-01-01T00:00:00Z",
    "pkiBrazil": {"cpf": "123.456.789-09", "responsavel": "Alan Mathison Turing"},
    "issuer": {"subjectName": {"commonName": "Lacuna Test CA"}},
}


@pytest.fixture
def rest_pki():
    return RestPkiClient(REST_PKI_URL, "access-token")


def test_client_sends_bearer_token(requests_mock, rest_pki):
    requests_mock.get(REST_PKI_URL + "Api/System/Info", json={"ok": True})
    assert rest_pki.get("Api/System/Info") == {"ok": True}
    assert requests_mock.last_request.headers["Authorization"] == "Bearer access-token"


def test_client_requires_endpoint():
    with pytest.raises(ValueError):
        RestPkiClient("", "token")


@pytest.mark.parametrize("code", ["InvalidToken", "TokenAlreadyUsed", "TokenNotFound"])
def test_invalid_token_codes(requests_mock, rest_pki, code):
    requests_mock.post(REST_PKI_URL + "Api/PadesSignatures/abc/Finalize", status_code=409,
                       json={"code": code, "message": "token inválido"})
    with pytest.raises(InvalidTokenError):
        rest_pki.post("Api/PadesSignatures/abc/Finalize", token_scoped=True)


def test_404_on_token_route_is_invalid_token(requests_mock, rest_pki):
    requests_mock.post(REST_PKI_URL + "Api/PadesSignatures/abc/Finalize", status_code=404)
    with pytest.raises(InvalidTokenError):
        rest_pki.post("Api/PadesSignatures/abc/Finalize", token_scoped=True)


def test_404_elsewhere_is_upstream_error(requests_mock, rest_pki):
    requests_mock.get(REST_PKI_URL + "Api/PadesVisualPositioningPresets/NewPage", status_code=404)
    with pytest.raises(UpstreamError) as exc_info:
        rest_pki.get("Api/PadesVisualPositioningPresets/NewPage")
    assert exc_info.value.status_code == 404


def test_validation_error(requests_mock, rest_pki):
    requests_mock.post(REST_PKI_URL + "Api/PadesSignatures", status_code=422, json={
        "code": "ValidationError",
        "message": "documento inválido",
        "validationResults": {"errors": [{"message": "PDF corrompido"}]},
    })
    with pytest.raises(ValidationError) as exc_info:
        rest_pki.post("Api/PadesSignatures", {})
    assert exc_info.value.validation_results["errors"][0]["message"] == "PDF corrompido"
    assert isinstance(exc_info.value, UpstreamError)


def test_server_error(requests_mock, rest_pki):
    requests_mock.post(REST_PKI_URL + "Api/PadesSignatures", status_code=500, text="boom")
    with pytest.raises(UpstreamError) as exc_info:
        rest_pki.post("Api/PadesSignatures", {})
    assert exc_info.value.status_code == 500


def test_network_failure(requests_mock, rest_pki):
    requests_mock.post(REST_PKI_URL + "Api/PadesSignatures", exc=requests.exceptions.ConnectTimeout)
    with pytest.raises(UpstreamError):
        rest_pki.post("Api/PadesSignatures", {})


def test_starter_request(requests_mock, rest_pki):
    requests_mock.post(REST_PKI_URL + "Api/PadesSignatures", json={"token": "tok-1"})
    starter = PadesSignatureStarter(rest_pki)
    starter.set_pdf_to_sign(PDF)
    starter.signature_policy_id = "policy"
    starter.security_context_id = "context"
    starter.visual_representation = VisualRepresentation(position=sample_positioning(5))

    assert starter.start_with_webpki() == "tok-1"
    body = requests_mock.last_request.json()
    assert base64.b64decode(body["pdfToSign"]) == PDF
    assert body["signaturePolicyId"] == "policy"
    assert body["securityContextId"] == "context"
    assert body["visualRepresentation"]["position"]["manual"]["left"] == 2.54


def test_starter_reads_paths_and_streams(tmp_path):
    path = tmp_path / "doc.pdf"
    path.write_bytes(PDF)
    starter = PadesSignatureStarter(client=None)
    starter.set_pdf_to_sign(path)
    assert starter.pdf_to_sign == PDF
    starter.set_pdf_to_sign(io.BytesIO(b"%PDF-outro"))
    assert starter.pdf_to_sign == b"%PDF-outro"
    with pytest.raises(TypeError):
        starter.set_pdf_to_sign(42)


def test_starter_requires_pdf_and_policy(rest_pki):
    starter = PadesSignatureStarter(rest_pki)
    with pytest.raises(ValueError):
        starter.start_with_webpki()
    starter.set_pdf_to_sign(PDF)
    with pytest.raises(ValueError):
        starter.start_with_webpki()


def test_starter_without_token(requests_mock, rest_pki):
    requests_mock.post(REST_PKI_URL + "Api/PadesSignatures", json={})
    starter = PadesSignatureStarter(rest_pki)
    starter.set_pdf_to_sign(PDF)
    starter.signature_policy_id = "policy"
    with pytest.raises(UpstreamError):
        starter.start_with_webpki()


def test_finisher(requests_mock, rest_pki):
    requests_mock.post(REST_PKI_URL + "Api/PadesSignatures/tok-1/Finalize", json={
        "signedPdf": base64.b64encode(b"%PDF-assinado").decode(),
        "certificate": CERTIFICATE_MODEL,
    })
    finisher = PadesSignatureFinisher(rest_pki)
    finisher.token = "tok-1"
    with pytest.raises(RuntimeError):
        finisher.certificate_info

    assert finisher.finish() == b"%PDF-assinado"
    cert = finisher.certificate_info
    assert cert.subject_name == "Alan Mathison Turing"
    assert cert.issuer_name == "Lacuna Test CA"
    assert cert.pki_brazil.cpf == "123.456.789-09"
    assert cert.validity_end.year == 2027
    assert cert.issuer.subject_name == "Lacuna Test CA"


def test_finisher_token_used_once(requests_mock, rest_pki):
    requests_mock.post(REST_PKI_URL + "Api/PadesSignatures/tok-1/Finalize", [
        {"json": {"signedPdf": base64.b64encode(b"%PDF").decode(), "certificate": CERTIFICATE_MODEL}},
        {"status_code": 409, "json": {"code": "TokenAlreadyUsed", "message": "token já utilizado"}},
    ])
    first = PadesSignatureFinisher(rest_pki)
    first.token = "tok-1"
    first.finish()

    second = PadesSignatureFinisher(rest_pki)
    second.token = "tok-1"
    with pytest.raises(InvalidTokenError):
        second.finish()


def test_finisher_requires_token(rest_pki):
    with pytest.raises(ValueError):
        PadesSignatureFinisher(rest_pki).finish()


def test_certificate_model_tolerates_missing_fields():
    cert = PKCertificate.from_model({"subjectName": "CN=Someone", "validityStart": "ontem"})
    assert cert.subject_name == "CN=Someone"
    assert cert.validity_start is None
    assert cert.pki_brazil.cpf is None
    assert PKCertificate.from_model(None) is None
