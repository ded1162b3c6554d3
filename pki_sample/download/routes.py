from flask import send_from_directory, abort
from werkzeug.utils import secure_filename
from . import download_bp
from ..extensions import get_extensions


@download_bp.route("/download/<filename>", methods=["GET"])
def download(filename):
    if secure_filename(filename) != filename or not filename.endswith(".pdf"):
        abort(404)
    return send_from_directory(
        get_extensions().temp_folder, filename,
        mimetype="application/pdf", as_attachment=True,
    )
