import os
import logging
from flask import Flask, session, g
from config import Config
from extensions import db, login_manager, init_extensions
from models import Partner


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    if not app.debug:
        app.config.update(
            SESSION_COOKIE_SECURE=True,
            SESSION_COOKIE_HTTPONLY=True,
            REMEMBER_COOKIE_SECURE=True,
            REMEMBER_COOKIE_HTTPONLY=True,
        )

    # ------------------------------------------------------------------------------------------
    # SIMPLIFIED LOGGING - No rotation to avoid permission errors
    # ------------------------------------------------------------------------------------------
    logs_dir = 'logs'
    if not os.path.exists(logs_dir):
        os.makedirs(logs_dir)

    file_handler = logging.FileHandler('logs/app.log', mode='a', encoding='utf-8')
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
    ))
    file_handler.setLevel(logging.INFO)

    app.logger.handlers.clear()
    app.logger.addHandler(file_handler)
    app.logger.setLevel(logging.INFO)
    app.logger.propagate = False  # Prevent duplicate logs

    if app.debug:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.DEBUG)
        app.logger.addHandler(console_handler)

    # --------------------------------------------------------------------------------------------------------------------------
    # DATABASE URI Fix
    # --------------------------------------------------------------------------------------------------------------------------
    DATABASE_URI = app.config.get("SQLALCHEMY_DATABASE_URI")

    if DATABASE_URI and DATABASE_URI.startswith("sqlite:///") and not app.config.get("TESTING"):
        db_dir = os.path.dirname(DATABASE_URI[len("sqlite:///"):])
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

    if DATABASE_URI and DATABASE_URI.startswith("postgres://"):
        DATABASE_URI = DATABASE_URI.replace("postgres://", "postgresql+pg8000://", 1)
        app.config["SQLALCHEMY_DATABASE_URI"] = DATABASE_URI

    # --------------------------------------------------------------------------------------------------------------------------
    # Initialize extensions
    # --------------------------------------------------------------------------------------------------------------------------
    init_extensions(app)

    # ------------------------------------------------------------------------------------------------------------------------
    # Register blueprints
    # ------------------------------------------------------------------------------------------------------------------------
    def register_blueprints(app):
        from blueprints.auth import bp as auth_bp
        from blueprints.dashboard import bp as dashboard_bp

        app.register_blueprint(auth_bp)
        app.register_blueprint(dashboard_bp)

    register_blueprints(app)

    # ------------------------------------------------------------------------------------------------------------------------
    # Flask-Login user_loader - inside create_app to avoid circular imports
    # ------------------------------------------------------------------------------------------------------------------------
    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(Partner, int(user_id))

    # ----------------------
    # Global before_request
    # ----------------------
    @app.before_request
    def load_logged_in_partner():
        g.partner = None
        partner_id = session.get("user_id")
        if partner_id:
            g.partner = db.session.get(Partner, partner_id)

    # ----------------------
    # Basic routes
    # ----------------------
    @app.route("/healthz")
    def healthz():
        return {"status": "ok"}, 200

    app.logger.info(f"Partner CRM started (database: {app.config['SQLALCHEMY_DATABASE_URI'].split('://')[0]})")
    return app

#=======================================================================================================
#------------------------THE END OF APP----------------------------------------------------------------
#==========================================================================================================
