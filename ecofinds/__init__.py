import logging

from flask import Flask
from flask_cors import CORS

from .cli import register_commands
from .config import Config
from .errors import register_error_handlers
from .models import db
from .routes import api


def configure_logging(level):
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )


def create_app(config_object=None, **overrides):
    app = Flask(__name__)
    app.config.from_object(config_object or Config)
    app.config.update(overrides)
    configure_logging(app.config['LOG_LEVEL'])

    db.init_app(app)
    prefix = app.config['API_PREFIX']
    app.register_blueprint(api, url_prefix=prefix)
    CORS(app, resources={f'{prefix}/*': {'origins': app.config['CORS_ORIGINS']}})
    register_error_handlers(app)
    register_commands(app)

    with app.app_context():
        db.create_all()

    return app
