# Database module
from .connection import engine, build_engine, get_session, init_db, close_db, transaction, DATABASE_URL
from .schema import init_schema
