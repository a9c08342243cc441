from sqlalchemy.engine import Engine
from sqlmodel import SQLModel
from utils.logger import get_logger

logger = get_logger(__name__)

def init_schema(engine: Engine):
    """
    ORM メタデータから groups / songs / song_details を直接作成する。
    本番では Alembic (init_db) を使い、こちらは開発用DBとテストで使用します。
    """
    # テーブル定義をメタデータに登録する
    import models  # noqa: F401

    SQLModel.metadata.create_all(engine)
    logger.info("Schema initialization completed successfully")
