from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from config import config


def build_engine(url: str, echo: bool = False):
    if url.startswith("sqlite"):
        # One shared connection so every worker thread sees the same database
        return create_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(
        url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
    )


engine = build_engine(config.DATABASE_URL, echo=config.SQL_ECHO)
