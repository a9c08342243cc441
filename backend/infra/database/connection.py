import os
from contextlib import contextmanager
from typing import Iterator
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import create_engine, Session
from config import settings, BACKEND_DIR
from utils.logger import get_logger

logger = get_logger(__name__)

DATABASE_URL = settings.DATABASE_URL
ALEMBIC_INI_PATH = os.path.join(BACKEND_DIR, "alembic.ini")

def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite は接続ごとに外部キー制約 (ON DELETE CASCADE) を有効化する必要がある
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()

def build_engine(url: str, echo: bool = False, **kwargs) -> Engine:
    """
    URL からエンジンを作成する。SQLite の場合は外部キー制約を有効化する。
    """
    if url.startswith("sqlite"):
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        new_engine = create_engine(url, echo=echo, connect_args=connect_args, **kwargs)
        event.listen(new_engine, "connect", _enable_sqlite_foreign_keys)
        return new_engine
    return create_engine(url, echo=echo, pool_pre_ping=True, **kwargs)

engine = build_engine(DATABASE_URL, echo=settings.sql_echo)

def init_db():
    """
    アプリケーション起動時のDB初期化フロー。
    Alembic のマイグレーションを head まで適用します。
    """
    from alembic.config import Config
    from alembic import command

    alembic_cfg = Config(ALEMBIC_INI_PATH)
    alembic_cfg.set_main_option("script_location", settings.migration_dir)

    logger.info(f"Applying migrations from {settings.migration_dir}")
    try:
        with engine.begin() as connection:
            alembic_cfg.attributes["connection"] = connection
            command.upgrade(alembic_cfg, "head")
    except Exception as e:
        logger.error(f"Error applying migrations: {e}")
        raise

def close_db():
    """
    データベース接続を終了する。
    main.py の lifespan イベントから呼び出されます。
    """
    engine.dispose()

def get_session():
    with Session(engine) as session:
        yield session

@contextmanager
def transaction(session: Session) -> Iterator[Session]:
    """
    複数ステートメントの書き込みを1トランザクションで実行する。
    正常終了で commit、例外 (KeyboardInterrupt 等を含む) では rollback してから再送出する。
    """
    try:
        yield session
        session.commit()
    except BaseException:
        session.rollback()
        raise
