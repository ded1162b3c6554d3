import logging

import requests

from ..errors import InvalidTokenError, UpstreamError, ValidationError

logger = logging.getLogger(__name__)

INVALID_TOKEN_CODES = frozenset({
    "InvalidToken",
    "TokenNotFound",
    "TokenAlreadyUsed",
    "SignatureSessionExpired",
})


class RestPkiClient:
    """
    Cliente HTTP mínimo da API REST PKI.

    Toda chamada autentica com o access token da aplicação (bearer) e
    converte respostas de erro nas exceções de ``pki_sample.errors``.
    """

    def __init__(self, endpoint_url: str, access_token: str, timeout: float = 30, session=None):
        if not endpoint_url:
            raise ValueError("endpoint_url é obrigatório")
        self.endpoint_url = endpoint_url.rstrip("/") + "/"
        self.access_token = access_token
        self.timeout = timeout
        self.session = session or requests.Session()

    def _headers(self):
        return {
            "Authorization": f"Bearer {self.access_token}",
            "Accept": "application/json",
        }

    def get(self, path: str, params=None, token_scoped=False):
        return self._request("GET", path, token_scoped, params=params)

    def post(self, path: str, data=None, token_scoped=False):
        return self._request("POST", path, token_scoped, json=data)

    def _request(self, method, path, token_scoped, **kwargs):
        url = self.endpoint_url + path.lstrip("/")
        try:
            response = self.session.request(
                method, url, headers=self._headers(), timeout=self.timeout, **kwargs
            )
        except requests.RequestException as e:
            logger.error("REST PKI inacessível em %s %s: %s", method, url, e)
            raise UpstreamError(f"falha de comunicação com o REST PKI: {e}") from e

        if 200 <= response.status_code < 300:
            if not response.content:
                return None
            try:
                return response.json()
            except ValueError as e:
                raise UpstreamError(
                    "resposta inválida do REST PKI", status_code=response.status_code
                ) from e

        raise _error_from_response(method, url, response, token_scoped)


def _error_from_response(method, url, response, token_scoped):
    try:
        body = response.json() or {}
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    code = body.get("code")
    message = body.get("message") or f"REST PKI retornou HTTP {response.status_code}"
    detail = body.get("detail")
    logger.warning(
        "REST PKI rejeitou %s %s: status=%s code=%s message=%s",
        method, url, response.status_code, code, message,
    )

    # 404 em rotas /{token}/ significa token desconhecido
    if code in INVALID_TOKEN_CODES or (token_scoped and response.status_code == 404):
        return InvalidTokenError(message)
    if response.status_code == 422 and body.get("validationResults"):
        return ValidationError(message, body["validationResults"], code=code)
    return UpstreamError(message, status_code=response.status_code, code=code, detail=detail)
