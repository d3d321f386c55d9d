import os
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.abspath(os.path.dirname(__file__))

MB = 1024 * 1024


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "dev-jwt-secret")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Uploads
    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", os.path.join(BASE_DIR, "..", "uploads"))
    MAX_FILE_SIZE = 10 * MB
    # Leaves headroom for the other multipart form fields
    MAX_CONTENT_LENGTH = 11 * MB

    # Stand-in identity for requests that carry no JWT
    DEFAULT_ACTOR = os.getenv("DEFAULT_ACTOR", "Admin")

    DEFAULT_PAGE_SIZE = 10
    MAX_PAGE_SIZE = 100

    DEFAULT_MENU_TYPES = ("Top Menu", "Main Menu", "Footer", "Others", "Hidden")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DEV_DATABASE_URI",
        "sqlite:///" + os.path.join(BASE_DIR, "..", "menu_cms_dev.db"),
    )
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")


class ProductionConfig(BaseConfig):
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URI")


class TestingConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    JWT_SECRET_KEY = "testing-jwt-secret-key-of-32-bytes-or-more"
    LOG_LEVEL = "WARNING"


config_by_name = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}
