from flask import Flask
from flask_cors import CORS
from werkzeug.exceptions import HTTPException
from flask_jwt_extended import JWTManager
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker, scoped_session
from dotenv import load_dotenv
from typing import Optional, Dict, Any
import logging

from .config.settings import load_settings

load_dotenv()

db_engine = None
SessionLocal = None
jwt = JWTManager()


def _unauthorized(details: str):
    return {'error': 'Unauthorized', 'details': details}, 401


@jwt.unauthorized_loader
def _missing_token(reason: str):
    return _unauthorized(reason)


@jwt.invalid_token_loader
def _invalid_token(reason: str):
    return _unauthorized(reason)


@jwt.expired_token_loader
def _expired_token(jwt_header, jwt_payload):
    return _unauthorized('Token has expired')


def create_app(config: Optional[Dict[str, Any]] = None):
    global db_engine, SessionLocal
    app = Flask(__name__)

    app.config.update(load_settings())
    if config:
        # allow tests or callers to override default config values
        app.config.update(config)

    logging.basicConfig(level=app.config['LOG_LEVEL'])
    app.logger.setLevel(app.config['LOG_LEVEL'])

    # Database
    db_url = app.config['DATABASE_URL']
    if db_url.endswith(':memory:'):
        # Ensure a single shared in-memory SQLite database across all sessions
        db_engine = create_engine(
            db_url,
            echo=False,
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        db_engine = create_engine(db_url, echo=False, future=True, pool_pre_ping=True)
    SessionLocal = scoped_session(sessionmaker(bind=db_engine, expire_on_commit=False, autoflush=False))

    jwt.init_app(app)
    # Portal SPA may be served from any origin
    CORS(app)

    from .services.storage import build_object_store
    from .services.notifications import build_notifier, long_date, long_datetime
    app.extensions['object_store'] = build_object_store(app.config)
    app.extensions['notifier'] = build_notifier(app.config)
    app.add_template_filter(long_date)
    app.add_template_filter(long_datetime)

    from .routes.vendor_requests import requests_bp
    from .routes.vendor_info import vendor_info_bp
    from .routes.uploads import uploads_bp
    app.register_blueprint(requests_bp)
    app.register_blueprint(vendor_info_bp)
    app.register_blueprint(uploads_bp)

    @app.teardown_appcontext
    def remove_session(exc=None):
        SessionLocal.remove()

    @app.route('/healthz')
    def health():
        return {'status': 'ok'}

    # Unified error handler producing the {error, details?} envelope
    @app.errorhandler(Exception)
    def handle_errors(e):  # type: ignore
        if isinstance(e, HTTPException):
            payload = {'error': e.description}
            details = getattr(e, 'details', None)
            if details:
                payload['details'] = details
            return payload, e.code
        # Unhandled exception; message kept for operator diagnosis
        app.logger.exception('Unhandled exception')
        return {'error': str(e) or 'Internal server error'}, 500

    return app


def get_db():
    return SessionLocal()
