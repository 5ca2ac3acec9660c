"""
Stockroom Service
Flask-based service for warehouse inventory and pick lists.
"""

import logging
from flask import Flask
from flask_cors import CORS

__version__ = '1.0.0'

logger = logging.getLogger(__name__)


def create_app(config_name='default'):
    """Application factory pattern"""
    # Load environment variables before the config classes are read
    from dotenv import load_dotenv
    load_dotenv()

    app = Flask(__name__)

    from config import config, get_database_uri
    app.config.from_object(config[config_name])
    if not app.config.get('SQLALCHEMY_DATABASE_URI'):
        app.config['SQLALCHEMY_DATABASE_URI'] = get_database_uri()

    # Configure logging
    if not app.testing:
        logging.basicConfig(
            level=getattr(logging, app.config['LOG_LEVEL']),
            format='%(asctime)s %(levelname)s %(name)s: %(message)s'
        )

    from stockroom.api.middlewares.correlation_id import CorrelationIdMiddleware, init_correlation_id_logging
    CorrelationIdMiddleware(app)
    init_correlation_id_logging(app)

    from stockroom.database import init_db
    init_db(app)

    CORS(app, origins=app.config.get('CORS_ORIGINS', ['*']))

    from stockroom.events import init_change_feed
    init_change_feed(app)

    from stockroom.api.controllers import api_bp, health_bp
    app.register_blueprint(api_bp, url_prefix='/api/v1')
    app.register_blueprint(health_bp)

    from stockroom.utils.error_handlers import register_error_handlers
    register_error_handlers(app)

    app.logger.info(f"Stockroom service created with {config_name} configuration")
    return app


def init_database(app):
    """Create tables when migrations are not in use"""
    from stockroom.database import db
    with app.app_context():
        try:
            from sqlalchemy import text
            db.session.execute(text('SELECT 1'))
            db.create_all()
            app.logger.info("Database tables created successfully")
            return True
        except Exception as e:
            app.logger.error(f"Failed to create database tables: {e}")
            if not app.debug:
                raise
            app.logger.warning("Continuing without database connection in development mode")
            return False
