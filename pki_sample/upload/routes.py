import uuid
import traceback
import logging
from flask import request, render_template, redirect, url_for
from . import upload_bp
from ..extensions import get_extensions

PDF_MAGIC = b"%PDF-"


@upload_bp.route("/upload", methods=["GET"])
def upload_form():
    return render_template("upload.html")


@upload_bp.route("/upload", methods=["POST"])
def upload():
    userfile = request.files.get("userfile")
    if userfile is None or not userfile.filename:
        return render_template("upload.html", message="selecione um arquivo PDF"), 400

    try:
        content = userfile.read()
        if not content.startswith(PDF_MAGIC):
            return render_template("upload.html", message="o arquivo enviado não é um PDF"), 400

        # o arquivo fica na pasta temporária; normalmente viria do banco de dados da aplicação
        filename = f"{uuid.uuid4()}.pdf"
        (get_extensions().temp_folder / filename).write_bytes(content)

    except Exception as e:
        tb = traceback.format_exc()
        logging.error(tb)
        return render_template("error.html", message=str(e)), 500

    return redirect(url_for("pades_signature.start", userfile=filename))
