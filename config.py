import os

from dotenv import load_dotenv

load_dotenv()


class Config:
    FLASK_ENV = os.getenv("FLASK_ENV", "production")
    FLASK_HOST = os.getenv("FLASK_HOST", "0.0.0.0")
    FLASK_PORT = int(os.getenv("FLASK_PORT", "6000"))

    DB_HOST = os.getenv("DB_HOST", "127.0.0.1")
    DB_PORT = int(os.getenv("DB_PORT", "5432"))
    DB_NAME = os.getenv("DB_NAME", "apothecary")
    DB_USER = os.getenv("DB_USER", "postgres")
    DB_PASSWORD = os.getenv("DB_PASSWORD", "postgres")

    SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"

    FORECAST_MAX_WORKERS = int(os.getenv("FORECAST_MAX_WORKERS", "8"))
    # Unset in production; tests and demos pin it to get repeatable projections
    FORECAST_RANDOM_SEED = os.getenv("FORECAST_RANDOM_SEED")

    @property
    def DATABASE_URL(self):
        override = os.getenv("DATABASE_URL")
        if override:
            return override
        return (
            f"postgresql+psycopg2://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    @property
    def random_seed(self):
        if self.FORECAST_RANDOM_SEED in (None, ""):
            return None
        return int(self.FORECAST_RANDOM_SEED)


config = Config()
