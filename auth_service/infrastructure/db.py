from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from .models import Base


def make_engine(database_url: str) -> Engine:
    # Параметры подключения зависят от драйвера
    connect_args = {}
    if database_url.startswith("postgresql"):
        connect_args = {"client_encoding": "utf8"}
    elif database_url.startswith("sqlite"):
        # sync-эндпоинты FastAPI выполняются в пуле потоков
        connect_args = {"check_same_thread": False}

    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
        pool_recycle=3600,
        connect_args=connect_args,
        echo=False
    )


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


def init_db(engine: Engine) -> None:
    Base.metadata.create_all(bind=engine)
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))


def get_db(request: Request):
    db = request.app.state.session_factory()
    try: yield db
    finally: db.close()
