import os
import pytest
import sys
import tempfile
from datetime import date
from typing import Generator
from sqlalchemy.pool import StaticPool
from sqlmodel import Session

# 1. パス解決: backendディレクトリをsys.pathに追加
CURRENT_DIR = os.path.dirname(os.path.abspath(__file__))
BACKEND_DIR = os.path.dirname(CURRENT_DIR)
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

# 2. config の読み込み前にテスト用の環境変数を設定する
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["EXTERNAL_API_URL"] = "http://metadata.test"
os.environ["LOG_DIR"] = os.path.join(tempfile.gettempdir(), "songlib_test_logs")

from infra.database.connection import build_engine, get_session
from infra.database.schema import init_schema
from infra.repositories.song_repository import SongRepository
from models import Song, SongDetails
from utils.external_metadata import MetadataClient, SongInfo, get_metadata_client

@pytest.fixture(name="engine")
def engine_fixture():
    """テストごとに独立したインメモリ SQLite を用意する"""
    engine = build_engine("sqlite://", poolclass=StaticPool)
    init_schema(engine)
    yield engine
    engine.dispose()

@pytest.fixture(name="session")
def session_fixture(engine, mocker) -> Generator[Session, None, None]:
    # アプリ起動時の init_db (Alembic) がテスト中に走らないようモック化
    mocker.patch("infra.database.connection.init_db")
    mocker.patch("infra.database.connection.close_db")

    with Session(engine) as session:
        yield session

@pytest.fixture(name="song_info")
def song_info_fixture() -> SongInfo:
    return SongInfo(
        release_date=date(2006, 7, 16),
        text="Ooh baby, don't you know I suffer?\nOoh baby, can you hear me moan?\n\nYou caught me under false pretenses",
        link="https://www.youtube.com/watch?v=Xsp3_a-PMTw",
    )

@pytest.fixture(name="metadata_client")
def metadata_client_fixture(mocker, song_info: SongInfo) -> MetadataClient:
    """外部メタデータAPIへの通信は行わず、fetch_details をモック化する"""
    client = MetadataClient("http://metadata.test")
    client.fetch_details = mocker.AsyncMock(return_value=song_info)
    return client

@pytest.fixture(name="client")
def client_fixture(session: Session, metadata_client: MetadataClient) -> Generator:
    """FastAPIのTestClientを提供し、DBセッションと外部APIクライアントをDIで差し替える"""
    from fastapi.testclient import TestClient
    from main import app

    app.dependency_overrides[get_session] = lambda: session
    app.dependency_overrides[get_metadata_client] = lambda: metadata_client
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()

@pytest.fixture(name="make_song")
def make_song_fixture(session: Session):
    """グループ + 楽曲 + 詳細をまとめて作成するファクトリ"""
    repository = SongRepository(session)

    def _make_song(
        name: str,
        group: str = "Muse",
        release_date: date = date(2006, 7, 16),
        text: str = "no information",
        link: str = "no information",
    ) -> Song:
        group_id = repository.get_or_create_group(group)
        details = SongDetails(release_date=release_date, text=text, link=link)
        return repository.create_song_with_details(Song(name=name, group_id=group_id), details)

    return _make_song
