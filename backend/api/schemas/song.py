from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import date
from sqlmodel import SQLModel

# PostgreSQL BIGINT の上限。これを超える ID や件数は 400 にする
MAX_ID = 2**63 - 1

class SongRead(SQLModel):
    id: int
    name: str
    group_id: int

class SongDetailsRead(SQLModel):
    id: int
    song_id: int
    release_date: date
    text: str
    link: str

class SongListResponse(BaseModel):
    song: List[SongRead]

class TextResponse(BaseModel):
    text: str

class EditSongResponse(BaseModel):
    song: SongRead
    song_details: SongDetailsRead

class ErrorResponse(BaseModel):
    error: str

# --- Request bodies ---

class SongPatch(BaseModel):
    """空文字 / 0 は「変更しない」扱い"""
    id: Optional[int] = None
    name: Optional[str] = None
    group_id: Optional[int] = Field(default=None, ge=0, le=MAX_ID)

class SongDetailsPatch(BaseModel):
    id: Optional[int] = None
    song_id: Optional[int] = None
    release_date: Optional[str] = None
    text: Optional[str] = None
    link: Optional[str] = None

class EditSongPayload(BaseModel):
    song: Optional[SongPatch] = None
    song_details: Optional[SongDetailsPatch] = None

class NewSongPayload(BaseModel):
    group: str = ""
    song: str = ""

    model_config = ConfigDict(
        json_schema_extra={"example": {"group": "Muse", "song": "Supermassive Black Hole"}}
    )
