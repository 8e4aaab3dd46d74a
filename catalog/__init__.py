from flask import Flask

from .config import Config
from .extensions import db, cors, migrate
from .utils.api import ok
from .utils.logger import configure_logging

def create_app(config_class=Config):
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_class)
    config_class.init_app(app)
    configure_logging(app.config.get("LOG_LEVEL"))

    # Init extensions
    db.init_app(app)
    cors.init_app(app, resources={r"/api/*": {"origins": "*"}})
    migrate.init_app(app, db)

    # Register blueprints
    from .product import bp as product_bp; app.register_blueprint(product_bp)
    from .coupon import bp as coupon_bp; app.register_blueprint(coupon_bp)

    from .errors import register_error_handlers
    register_error_handlers(app)

    from .cli import register_cli
    register_cli(app)

    @app.get("/")
    def health():
        return ok("API running", {"ok": True})

    with app.app_context():
        from . import model  # noqa: F401  registers tables
        db.create_all()

    return app
