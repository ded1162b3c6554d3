import logging
import os
import secrets
import time
from pathlib import Path

from ..errors import InvalidTokenError

logger = logging.getLogger(__name__)

NONCE_SIZE = 16


class FileNonceStore:
    """
    Guarda nonces como arquivos vazios em ``<folder>``.

    O consumo remove o arquivo: ``unlink`` só tem sucesso uma vez, mesmo com
    vários workers do gunicorn lendo a mesma pasta, o que garante uso único
    sem locks.
    """

    def __init__(self, folder, ttl_seconds: int = 300):
        self.folder = Path(folder)
        self.folder.mkdir(parents=True, exist_ok=True)
        self.ttl_seconds = ttl_seconds

    def _path(self, nonce: bytes) -> Path:
        return self.folder / f"{nonce.hex()}.nonce"

    def issue(self) -> bytes:
        # nonces emitidos e nunca consumidos só saem da pasta por aqui
        self.purge_expired()
        nonce = secrets.token_bytes(NONCE_SIZE)
        self._path(nonce).touch(exist_ok=False)
        return nonce

    def consume(self, nonce: bytes):
        if not nonce or len(nonce) != NONCE_SIZE:
            raise InvalidTokenError("nonce inválido")

        path = self._path(nonce)
        try:
            issued_at = path.stat().st_mtime
            path.unlink()
        except FileNotFoundError:
            raise InvalidTokenError("nonce desconhecido ou já utilizado") from None

        if time.time() - issued_at > self.ttl_seconds:
            raise InvalidTokenError("nonce expirado")

    def purge_expired(self) -> int:
        limit = time.time() - self.ttl_seconds
        removed = 0
        for path in self.folder.glob("*.nonce"):
            try:
                if path.stat().st_mtime < limit:
                    os.unlink(path)
                    removed += 1
            except FileNotFoundError:
                continue
        if removed:
            logger.info("%d nonces expirados removidos", removed)
        return removed
