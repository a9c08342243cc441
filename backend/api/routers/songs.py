from fastapi import APIRouter, Depends, Path, Request
from sqlmodel import Session
from typing import Any, Dict, Optional
from infra.database.connection import get_session
from api.schemas.song import (
    MAX_ID,
    EditSongPayload,
    EditSongResponse,
    ErrorResponse,
    NewSongPayload,
    SongDetailsRead,
    SongListResponse,
    SongRead,
    TextResponse,
)
from app.services.song_app_service import SongAppService
from domain.exceptions import InvalidInputError
from utils.dates import parse_release_date
from utils.external_metadata import MetadataClient, get_metadata_client

router = APIRouter(tags=["songs"])

# /swagger に {"error": "..."} 形式を載せる
ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid input"},
    404: {"model": ErrorResponse, "description": "Not found"},
    500: {"model": ErrorResponse, "description": "Storage or external API failure"},
}

# /api/songs で受け付けるクエリパラメータ (これ以外は 400)
LIST_QUERY_PARAMS = ("limit", "offset", "group", "name", "releaseDate", "text", "link")

def _parse_int(key: str, value: str) -> int:
    try:
        number = int(value)
    except ValueError as e:
        raise InvalidInputError(f"invalid {key} format: {e}") from e
    if number < 0:
        raise InvalidInputError(f"invalid {key} format: must not be negative")
    # DB の BIGINT に収まらない値はストレージまで渡さない
    if number > MAX_ID:
        raise InvalidInputError(f"invalid {key} format: value out of range")
    return number

def _parse_int_or_none(value: Optional[str]) -> Optional[int]:
    """page / limit 用。解釈できない値は None (= 既定値に丸める)"""
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None

def parse_list_query(query_params) -> Dict[str, Any]:
    """クエリ文字列を list_songs の引数に変換する。同じキーが複数ある場合は最初の値を使う"""
    filters: Dict[str, Any] = {}
    for key in query_params.keys():
        value = query_params.getlist(key)[0]
        if key in ("limit", "offset"):
            filters[key] = _parse_int(key, value)
        elif key == "releaseDate":
            try:
                filters["release_date"] = parse_release_date(value)
            except ValueError as e:
                raise InvalidInputError(f"invalid releaseDate format: {e}") from e
        elif key in LIST_QUERY_PARAMS:
            filters[key] = value
        else:
            raise InvalidInputError(f"unrecognized query parameter: {key}")
    return filters

@router.get("/api/songs", response_model=SongListResponse, responses=ERROR_RESPONSES)
def list_songs(request: Request, session: Session = Depends(get_session)):
    """
    Songs filtered by group, name, releaseDate, text, link with limit/offset paging.
    """
    filters = parse_list_query(request.query_params)
    songs = SongAppService(session).list_songs(**filters)
    return SongListResponse(song=[SongRead.model_validate(song) for song in songs])

@router.get("/api/songs/{song_id}/text", response_model=TextResponse, responses=ERROR_RESPONSES)
def get_text(
    song_id: int = Path(..., ge=0, le=MAX_ID),
    page: Optional[str] = None,
    limit: Optional[str] = None,
    session: Session = Depends(get_session)
):
    """
    Lyrics paginated by verse (verses are separated by a blank line).
    """
    service = SongAppService(session)
    text = service.get_text_page(song_id, _parse_int_or_none(page), _parse_int_or_none(limit))
    return TextResponse(text=text)

@router.delete("/api/songs/{song_id}/delete", responses=ERROR_RESPONSES)
def delete_song(song_id: int = Path(..., ge=0, le=MAX_ID), session: Session = Depends(get_session)):
    SongAppService(session).delete_song(song_id)
    return {}

@router.patch("/api/songs/{song_id}/edit", response_model=EditSongResponse, responses=ERROR_RESPONSES)
def edit_song(
    payload: EditSongPayload,
    song_id: int = Path(..., ge=0, le=MAX_ID),
    session: Session = Depends(get_session)
):
    song, details = SongAppService(session).edit_song(song_id, payload)
    return EditSongResponse(
        song=SongRead.model_validate(song),
        song_details=SongDetailsRead.model_validate(details),
    )

@router.post("/api/songs/new", status_code=201, response_model=SongRead, responses=ERROR_RESPONSES)
async def new_song(
    payload: NewSongPayload,
    session: Session = Depends(get_session),
    client: MetadataClient = Depends(get_metadata_client)
):
    song = await SongAppService(session).create_song(payload, client)
    return SongRead.model_validate(song)
