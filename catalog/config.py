import os

class Config:
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JSON_SORT_KEYS = False
    ENV = os.getenv("FLASK_ENV", "development")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    CURRENCY_SYMBOL = os.getenv("CURRENCY_SYMBOL", "$")
    API_UTC_OFFSET_HOURS = int(os.getenv("API_UTC_OFFSET_HOURS", "0"))
    TESTING = False

    @staticmethod
    def init_app(app):
        if not os.getenv("DATABASE_URL"):
            os.makedirs(app.instance_path, exist_ok=True)
            app.config["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{os.path.join(app.instance_path, 'catalog.db')}"
        else:
            app.config["SQLALCHEMY_DATABASE_URI"] = os.getenv("DATABASE_URL")


class TestingConfig(Config):
    TESTING = True
    LOG_LEVEL = "WARNING"

    @staticmethod
    def init_app(app):
        app.config["SQLALCHEMY_DATABASE_URI"] = "sqlite://"
