import traceback
import logging
from flask import request, render_template, make_response, current_app
from . import pades_signature_bp
from .service import (
    build_visual_representation, resolve_userfile,
    start_signature_logic, finish_signature_logic,
)
from ..config import Config
from ..errors import InvalidTokenError, UpstreamError
from ..extensions import get_extensions
from ..utils import get_pdf_stamp_content, get_sample_doc_content, set_no_cache_headers


def _error_page(message, status, validation_results=None):
    return render_template("error.html", message=message, validation_results=validation_results), status


@pades_signature_bp.route("/pades-signature", methods=["GET"])
def start():
    userfile = request.args.get("userfile") or None
    ext = get_extensions()
    try:
        if userfile:
            pdf_source = resolve_userfile(ext.temp_folder, userfile)
        else:
            pdf_source = get_sample_doc_content()

        visual = build_visual_representation(
            current_app.config.get("VISUAL_TEXT", Config.VISUAL_TEXT),
            get_pdf_stamp_content(),
            current_app.config.get("VISUAL_POSITIONING_SAMPLE", Config.VISUAL_POSITIONING_SAMPLE),
        )
        token = start_signature_logic(
            ext.rest_pki, pdf_source,
            current_app.config.get("SIGNATURE_POLICY_ID", Config.SIGNATURE_POLICY_ID),
            current_app.config.get("SECURITY_CONTEXT_ID", Config.SECURITY_CONTEXT_ID),
            visual,
        )

    except FileNotFoundError:
        return _error_page(f"arquivo '{userfile}' não encontrado", 404)
    except UpstreamError as e:
        return _error_page(f"o REST PKI recusou o início da assinatura: {e.message}", 502, getattr(e, "validation_results", None))
    except Exception as e:
        tb = traceback.format_exc()
        logging.error(tb)
        return _error_page(str(e), 500)

    response = make_response(render_template("pades-signature.html", token=token, userfile=userfile))
    return set_no_cache_headers(response)


@pades_signature_bp.route("/pades-signature", methods=["POST"])
def finish():
    token = request.form.get("token")
    if not token:
        return _error_page("campo 'token' é obrigatório", 400)

    ext = get_extensions()
    try:
        filename, signer_cert = finish_signature_logic(ext.rest_pki, token, ext.temp_folder)

    except InvalidTokenError as e:
        return _error_page(f"token inválido ou já utilizado: {e}. Reinicie a assinatura.", 400)
    except UpstreamError as e:
        return _error_page(f"o REST PKI recusou a finalização da assinatura: {e.message}", 502, getattr(e, "validation_results", None))
    except Exception as e:
        tb = traceback.format_exc()
        logging.error(tb)
        return _error_page(str(e), 500)

    return render_template("pades-signature-info.html", signer_cert=signer_cert, filename=filename)
