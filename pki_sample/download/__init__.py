from flask import Blueprint

download_bp = Blueprint("download", __name__)

from . import routes  # noqa: E402,F401
