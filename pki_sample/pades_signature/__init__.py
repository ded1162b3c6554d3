from flask import Blueprint

pades_signature_bp = Blueprint("pades_signature", __name__)

from . import routes  # noqa: E402,F401
