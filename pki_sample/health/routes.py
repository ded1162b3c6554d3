import os

from . import health_bp

from ..extensions import get_extensions


@health_bp.route("/health", methods=["GET"])
def health():
    temp_folder = get_extensions().temp_folder
    return {
        "status": "ok",
        "temp_folder_writable": temp_folder.is_dir() and os.access(temp_folder, os.W_OK),
    }, 200
