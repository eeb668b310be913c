# moviechat/config.py
import os
from dotenv import load_dotenv

# Load .env from the working directory, then from the same folder as config.py
load_dotenv()
load_dotenv(os.path.join(os.path.dirname(__file__), ".env"))

DEFAULT_IMAGE_BASE_URL = "https://image.tmdb.org/t/p/original"


def database_uri():
    """Pick the store URL: DATABASE_URL, then a MySQL URL from DB_*, then a SQLite file."""
    url = os.getenv("DATABASE_URL")
    if url:
        return url

    db_user = os.getenv("DB_USER")
    db_password = os.getenv("DB_PASSWORD")
    db_name = os.getenv("DB_NAME")
    if all([db_user, db_password, db_name]):
        db_host = os.getenv("DB_HOST", "localhost")
        db_port = os.getenv("DB_PORT", "3306")
        return f"mysql+pymysql://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}"

    sqlite_path = os.path.abspath(os.getenv("SQLITE_PATH", "movies.db"))
    return f"sqlite:///{sqlite_path}"


def log_level():
    # logging only knows the upper-case names
    return os.getenv("LOG_LEVEL", "INFO").upper()


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "fallback_key")

    SQLALCHEMY_DATABASE_URI = database_uri()
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    HOST = os.getenv("MOVIECHAT_HOST", "0.0.0.0")
    PORT = int(os.getenv("MOVIECHAT_PORT", "8081"))

    IMAGE_BASE_URL = os.getenv("IMAGE_BASE_URL", DEFAULT_IMAGE_BASE_URL)

    LOG_LEVEL = log_level()
