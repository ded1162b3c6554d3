import asyncio
import base64
import binascii

from flask import current_app


def run_sync(maybe_awaitable):
    if asyncio.iscoroutine(maybe_awaitable):
        loop = asyncio.new_event_loop()
        try:
            return loop.run_until_complete(maybe_awaitable)
        finally:
            loop.close()
    return maybe_awaitable


def b64decode_field(body: dict, name: str) -> bytes:
    value = body.get(name)
    if not value or not isinstance(value, str):
        raise ValueError(f"campo '{name}' (base64) é obrigatório")
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        raise ValueError(f"campo '{name}' não é base64 válido") from None


def set_no_cache_headers(response):
    # o token da página só vale para uma tentativa: o navegador não deve reaproveitá-la
    response.headers["Cache-Control"] = "private, no-store, max-age=0, no-cache, must-revalidate, post-check=0, pre-check=0"
    response.headers["Pragma"] = "no-cache"
    return response


def get_sample_doc_content() -> bytes:
    with open(current_app.config["SAMPLE_DOC_PATH"], "rb") as f:
        return f.read()


def get_pdf_stamp_content() -> bytes:
    with open(current_app.config["PDF_STAMP_PATH"], "rb") as f:
        return f.read()
