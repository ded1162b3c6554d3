import traceback
import logging
from flask import request, jsonify, render_template
from . import authentication_bp
from .service import start_authentication_logic, complete_authentication_logic
from ..errors import InvalidTokenError
from ..extensions import get_extensions


@authentication_bp.route("/authentication", methods=["GET"])
def authentication_page():
    return render_template("authentication.html")


@authentication_bp.route("/api/authentication", methods=["GET"])
def start_authentication():
    try:
        nonce_b64 = start_authentication_logic(get_extensions().authentication)
        response = jsonify(nonce_b64)
        response.headers["Cache-Control"] = "no-store"
        return response, 200

    except Exception as e:
        tb = traceback.format_exc()
        logging.error(tb)
        return jsonify({"message": str(e), "traceback": tb}), 500


@authentication_bp.route("/api/authentication", methods=["POST"])
def complete_authentication():
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return jsonify({"success": False, "message": "corpo JSON com certificate, nonce e signature é obrigatório"}), 400

    try:
        outcome = complete_authentication_logic(get_extensions().authentication, body)
        return jsonify(outcome), 200

    except ValueError as e:
        return jsonify({"success": False, "message": str(e)}), 400
    except InvalidTokenError as e:
        return jsonify({"success": False, "errorKind": "InvalidToken", "message": f"{e}. Reinicie a autenticação."}), 400
    except Exception as e:
        tb = traceback.format_exc()
        logging.error(tb)
        return jsonify({"success": False, "message": str(e), "traceback": tb}), 500
