import asyncio
import base64
import binascii
from dataclasses import dataclass
from typing import Optional

import requests

from ..errors import InvalidTokenError, ServerCommunicationError


@dataclass
class AuthOutcome:
    success: bool
    message: str
    validation_results: Optional[str] = None


class CoordinatorTransport:
    """Chamadas do cliente às rotas /api/authentication do servidor."""

    def __init__(self, base_url: str, session=None, timeout: float = 30):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method, path, payload=None):
        url = f"{self.base_url}/{path}"
        try:
            response = self.session.request(method, url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise ServerCommunicationError(f"falha de comunicação com {url}: {e}") from e
        try:
            body = response.json()
        except ValueError:
            raise ServerCommunicationError(
                f"{method} {url} retornou HTTP {response.status_code} sem JSON"
            ) from None
        return response.status_code, body

    def _start(self) -> bytes:
        status, body = self._request("GET", "api/authentication")
        if status != 200 or not isinstance(body, str):
            raise ServerCommunicationError(f"o servidor não emitiu um nonce (HTTP {status})")
        try:
            return base64.b64decode(body, validate=True)
        except binascii.Error:
            raise ServerCommunicationError("nonce recebido não é base64 válido") from None

    def _complete(self, certificate, nonce, signature) -> AuthOutcome:
        payload = {
            "certificate": base64.b64encode(certificate).decode(),
            "nonce": base64.b64encode(nonce).decode(),
            "signature": base64.b64encode(signature).decode(),
        }
        status, body = self._request("POST", "api/authentication", payload)
        # falhas de autenticação também chegam com "success": false (HTTP 200 ou 400)
        if not isinstance(body, dict) or "success" not in body:
            raise ServerCommunicationError(f"resposta inesperada do servidor (HTTP {status})")
        if status == 400 and body.get("errorKind") == "InvalidToken":
            raise InvalidTokenError(body.get("message") or "nonce recusado pelo servidor")
        return AuthOutcome(
            success=bool(body["success"]),
            message=body.get("message", ""),
            validation_results=body.get("validationResults"),
        )

    async def start_authentication(self) -> bytes:
        return await asyncio.to_thread(self._start)

    async def complete_authentication(self, certificate: bytes, nonce: bytes, signature: bytes) -> AuthOutcome:
        return await asyncio.to_thread(self._complete, certificate, nonce, signature)
