from flask import Flask, render_template
from .pades_signature import pades_signature_bp
from .authentication import authentication_bp
from .upload import upload_bp
from .download import download_bp
from .health import health_bp
from .config import Config
from .extensions import init_extensions
import logging

def _configure_logging(level):
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    for mod in ('pyhanko', 'pyhanko.sign', 'pyhanko.sign.validation',
                'pyhanko.sign.validation.generic_cms', 'pyhanko_certvalidator'):
        lg = logging.getLogger(mod)
        lg.setLevel(logging.CRITICAL)
        lg.propagate = False

def create_app(config_object=None, validation_context=None, rest_pki=None):
    app = Flask(__name__, instance_relative_config=False)
    app.config.from_object(Config if config_object is None else config_object)
    _configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    init_extensions(app, validation_context=validation_context, rest_pki=rest_pki)

    app.register_blueprint(pades_signature_bp)
    app.register_blueprint(authentication_bp)
    app.register_blueprint(upload_bp)
    app.register_blueprint(download_bp)
    app.register_blueprint(health_bp)

    @app.route("/", methods=["GET"])
    def index():
        return render_template("index.html")

    return app
