import os
import logging

logger = logging.getLogger(__name__)


def get_int_env(var_name: str, default: int) -> int:
    """Safely parse integer environment variables with defaults."""
    value = os.getenv(var_name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


class Config:
    """Application configuration."""
    SECRET_KEY = os.getenv("SECRET_KEY")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    APP_LOG_DIR = os.getenv("APP_LOG_DIR")
    SLOW_REQUEST_THRESHOLD_MS = float(os.getenv("SLOW_REQUEST_THRESHOLD_MS", "750"))
    SEED_ON_STARTUP = os.getenv("SEED_ON_STARTUP") == "1"
    MAX_CONTENT_LENGTH = get_int_env("MAX_CONTENT_LENGTH", 1024 * 1024)

    COMPRESS_MIMETYPES = ["application/json"]
    COMPRESS_LEVEL = 6
    COMPRESS_MIN_SIZE = 500

    @staticmethod
    def database_uri(instance_path: str) -> str:
        """Resolve the SQLAlchemy URI from the environment.

        ``DATABASE_URL`` wins; otherwise the ``DB_*`` variables build a
        MySQL URI. When any of them is missing a local SQLite file under
        the Flask instance folder is used.
        """
        database_url = os.getenv("DATABASE_URL")
        if database_url:
            return database_url

        db_user = os.getenv("DB_USER")
        db_password = os.getenv("DB_PASSWORD")
        db_host = os.getenv("DB_HOST")
        db_name = os.getenv("DB_NAME")

        missing_db_vars = [
            name for name, value in (
                ("DB_USER", db_user),
                ("DB_PASSWORD", db_password),
                ("DB_HOST", db_host),
                ("DB_NAME", db_name),
            )
            if value is None
        ]
        if missing_db_vars:
            logger.warning(
                "Variáveis de banco ausentes (%s); usando SQLite local em modo de fallback.",
                ", ".join(missing_db_vars),
            )
            os.makedirs(instance_path, exist_ok=True)
            return f"sqlite:///{os.path.join(instance_path, 'tarefas.db')}"

        if db_password == "":
            logger.warning("DB_PASSWORD está vazio; conectando ao MySQL sem senha (apenas recomendado para desenvolvimento local).")
        return f"mysql+pymysql://{db_user}:{db_password}@{db_host}/{db_name}"

    @staticmethod
    def engine_options(database_uri: str) -> dict:
        """Connection pool settings; SQLite engines keep the driver defaults."""
        if database_uri.startswith("sqlite"):
            return {}
        return {
            "pool_pre_ping": True,
            "pool_recycle": 1800,
            "pool_size": get_int_env("DB_POOL_SIZE", 10),
            "max_overflow": get_int_env("DB_MAX_OVERFLOW", 20),
            "pool_timeout": 30,
            "pool_use_lifo": True,
        }

    @staticmethod
    def rate_limit_storage() -> str:
        storage = os.getenv("RATELIMIT_STORAGE_URI")
        if not storage:
            redis_url = os.getenv("REDIS_URL")
            storage = redis_url if redis_url else "memory://"
        return storage

    @staticmethod
    def default_limits() -> list[str]:
        raw_default_limits = os.getenv("RATELIMIT_DEFAULT_LIMITS", "").strip()
        return [limit.strip() for limit in raw_default_limits.split(",") if limit.strip()]
