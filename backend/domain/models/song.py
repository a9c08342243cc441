from typing import Optional
from datetime import date
from sqlalchemy import Index, Text
from sqlmodel import Field, SQLModel

DEFAULT_RELEASE_DATE = date(1970, 1, 1)
NO_INFORMATION = "no information"

class Group(SQLModel, table=True):
    __tablename__ = "groups"
    """
    アーティスト / バンド
    """
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=255, unique=True, nullable=False)

class Song(SQLModel, table=True):
    __tablename__ = "songs"
    """
    楽曲 (必ず1つの Group に属する)
    """
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=255, nullable=False)
    group_id: int = Field(foreign_key="groups.id", ondelete="CASCADE")

    __table_args__ = (
        Index("idx_songs_name", "name"),
        Index("idx_songs_group_id", "group_id"),
    )

class SongDetails(SQLModel, table=True):
    __tablename__ = "song_details"
    """
    楽曲の詳細情報 (Song と 1:1、Song と同じトランザクションで作成)
    """
    id: Optional[int] = Field(default=None, primary_key=True)
    song_id: int = Field(foreign_key="songs.id", ondelete="CASCADE", unique=True)
    release_date: date = Field(
        default=DEFAULT_RELEASE_DATE,
        sa_column_kwargs={"server_default": DEFAULT_RELEASE_DATE.isoformat()},
    )
    text: str = Field(default=NO_INFORMATION, sa_type=Text, sa_column_kwargs={"server_default": NO_INFORMATION})
    link: str = Field(
        default=NO_INFORMATION,
        max_length=255,
        sa_column_kwargs={"server_default": NO_INFORMATION},
    )

    __table_args__ = (
        Index("idx_song_details_release_date", "release_date"),
    )
