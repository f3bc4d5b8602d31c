import logging

from flask import Flask
from flask_cors import CORS
from flask_sqlalchemy import SQLAlchemy

from inkfolio.config import Config, check_required_settings

# Initialize extensions
cors = CORS()
db = SQLAlchemy()


def create_app(config_object=None):
    app = Flask(__name__)
    app.config.from_object(config_object or Config)
    check_required_settings(app.config)

    if not app.testing:
        logging.basicConfig(level=app.config.get('LOG_LEVEL', 'INFO'))

    # Allow CORS for the admin frontend
    cors.init_app(app, resources={r"/api/*": {"origins": app.config['CORS_ORIGINS']}},
                  supports_credentials=True)
    db.init_app(app)

    # Process-wide collaborators, built once and handed to each request explicitly
    from inkfolio.auth import TokenService
    from inkfolio.content import ContentLoader
    from inkfolio.storage import storage_from_config
    app.extensions['tokens'] = TokenService.from_config(app.config)
    app.extensions['blob_storage'] = storage_from_config(app.config)
    app.extensions['content_loader'] = ContentLoader(app.config['CONTENT_DIR'])

    # Import all models before creating tables
    from inkfolio import models  # noqa: F401

    with app.app_context():
        db.create_all()

    from inkfolio.routes import api_bp
    app.register_blueprint(api_bp, url_prefix='/api')

    from inkfolio.errors import register_error_handlers
    register_error_handlers(app)

    from inkfolio.cli import register_commands
    register_commands(app)

    return app
