import asyncio
from datetime import date
from typing import List, Optional, Tuple
from sqlmodel import Session

from api.schemas.song import EditSongPayload, NewSongPayload, SongDetailsPatch, SongPatch
from domain.exceptions import InvalidInputError, NotFoundError, StorageError
from domain.models.song import Song, SongDetails
from domain.services.verse_paginator import VersePaginator
from infra.repositories.song_repository import SongRepository
from utils.dates import parse_release_date
from utils.external_metadata import MetadataClient, SongInfo
from utils.logger import get_logger

logger = get_logger(__name__)

class SongAppService:
    def __init__(self, session: Session):
        self.session = session
        self.repository = SongRepository(session)

    def list_songs(
        self,
        group: Optional[str] = None,
        name: Optional[str] = None,
        release_date: Optional[date] = None,
        text: Optional[str] = None,
        link: Optional[str] = None,
        limit: int = 0,
        offset: int = 0,
    ) -> List[Song]:
        try:
            return self.repository.list_songs(
                group=group,
                name=name,
                release_date=release_date,
                text=text,
                link=link,
                limit=limit,
                offset=offset,
            )
        except StorageError as e:
            raise StorageError(f"failed to select song from database: {e}") from e

    def get_text_page(self, song_id: int, page: Optional[int], limit: Optional[int]) -> str:
        try:
            text = self.repository.get_lyrics_by_song_id(song_id)
        except StorageError as e:
            raise StorageError(f"failed to retrieve text: {e}") from e

        if text is None:
            raise NotFoundError(f"no such text with song_id: {song_id}")

        verses = VersePaginator(text).page(page, limit)
        if verses is None:
            raise NotFoundError("no more verses")
        return verses

    def delete_song(self, song_id: int) -> None:
        try:
            self.repository.delete_song(song_id)
        except StorageError as e:
            raise StorageError(f"failed to delete song: {e}") from e
        logger.info(f"Deleted song id={song_id}")

    def edit_song(self, song_id: int, payload: EditSongPayload) -> Tuple[Song, SongDetails]:
        """
        部分更新: 指定があり、かつ空文字 / 0 でない項目だけを反映する。
        """
        try:
            song = self.repository.get_song_by_id(song_id)
            details = self.repository.get_song_details_by_song_id(song_id)
        except StorageError as e:
            raise StorageError(f"failed to retrieve song: {e}") from e

        if song is None or details is None:
            raise NotFoundError(f"no such song with song_id: {song_id}")

        # 日付の検証で失敗した場合に song 側だけ変更されないよう、詳細を先に反映する
        self._merge_details(details, payload.song_details or SongDetailsPatch())
        self._merge_song(song, payload.song or SongPatch())

        try:
            self.repository.update_song(song, details)
        except StorageError as e:
            raise StorageError(f"failed to update song: {e}") from e

        logger.info(f"Updated song id={song_id}")
        return song, details

    def _merge_song(self, song: Song, patch: SongPatch):
        if patch.name:
            song.name = patch.name
        if patch.group_id:
            song.group_id = patch.group_id

    def _merge_details(self, details: SongDetails, patch: SongDetailsPatch):
        if patch.release_date:
            try:
                details.release_date = parse_release_date(patch.release_date)
            except ValueError as e:
                raise InvalidInputError(f"invalid release_date format: {e}") from e
        if patch.text:
            details.text = patch.text
        if patch.link:
            details.link = patch.link

    async def create_song(self, payload: NewSongPayload, client: MetadataClient) -> Song:
        """
        外部APIで詳細を取得し、グループを取得 or 作成してから song + song_details を保存する。
        入力チェックは外部呼び出しや書き込みより前に行う。
        """
        if not payload.group:
            raise InvalidInputError("no group name")
        if not payload.song:
            raise InvalidInputError("no song name")

        info = await client.fetch_details(payload.group, payload.song)

        # DB アクセスは同期なのでイベントループを止めないようスレッドで実行する
        return await asyncio.to_thread(self._store_song, payload.group, payload.song, info)

    def _store_song(self, group_name: str, song_name: str, info: SongInfo) -> Song:
        try:
            group_id = self.repository.get_or_create_group(group_name)
        except StorageError as e:
            raise StorageError(f"failed to retrieve groupID: {e}") from e

        song = Song(name=song_name, group_id=group_id)
        try:
            song = self.repository.create_song_with_details(song, info.to_details())
        except StorageError as e:
            raise StorageError(f"failed to create song: {e}") from e

        logger.info(f"Created song '{song.name}' (id={song.id}, group_id={group_id})")
        return song
