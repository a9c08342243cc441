from datetime import date
from typing import List, Optional
from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select, col

from domain.exceptions import StorageError
from domain.models.song import Group, Song, SongDetails
from infra.database.connection import transaction
from utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_LIST_LIMIT = 25

class SongRepository:
    def __init__(self, session: Session):
        self.session = session

    def _apply_filters(
        self,
        query,
        group: Optional[str] = None,
        name: Optional[str] = None,
        release_date: Optional[date] = None,
        text: Optional[str] = None,
        link: Optional[str] = None,
    ):
        """
        指定されたフィルタだけを AND 条件として順に追加する。
        バインドパラメータの番号付けは実行時に SQLAlchemy が最終的な位置で行う。
        """
        # 部分一致 (大文字小文字を区別しない): group / name / text
        # 完全一致: release_date / link
        if group:
            query = query.join(Group, Song.group_id == Group.id)
            query = query.where(col(Group.name).icontains(group, autoescape=True))
        if name:
            query = query.where(col(Song.name).icontains(name, autoescape=True))
        if release_date:
            query = query.where(SongDetails.release_date == release_date)
        if text:
            query = query.where(col(SongDetails.text).icontains(text, autoescape=True))
        if link:
            query = query.where(SongDetails.link == link)
        return query

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
        """フィルタとページングを適用した楽曲一覧 (曲名の昇順)"""
        if limit == 0:
            limit = DEFAULT_LIST_LIMIT

        query = select(Song).join(SongDetails, Song.id == SongDetails.song_id)
        query = self._apply_filters(
            query,
            group=group,
            name=name,
            release_date=release_date,
            text=text,
            link=link,
        )
        query = query.order_by(Song.name).offset(offset).limit(limit)

        try:
            return list(self.session.exec(query).all())
        except SQLAlchemyError as e:
            raise StorageError(f"error executing query: {e}") from e

    def get_lyrics_by_song_id(self, song_id: int) -> Optional[str]:
        """歌詞を返す。行が存在しない場合は None (エラーではない)"""
        try:
            return self.session.exec(
                select(SongDetails.text).where(SongDetails.song_id == song_id)
            ).first()
        except SQLAlchemyError as e:
            raise StorageError(f"error scanning song: {e}") from e

    def delete_song(self, song_id: int) -> None:
        # 存在しない ID でもエラーにしない (0 行削除)。song_details は ON DELETE CASCADE で消える
        try:
            self.session.exec(delete(Song).where(Song.id == song_id))
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StorageError(f"error deleting song: {e}") from e

    def get_group_id_by_name(self, name: str) -> int:
        """グループIDを返す。存在しない場合は 0"""
        try:
            group_id = self.session.exec(select(Group.id).where(Group.name == name)).first()
        except SQLAlchemyError as e:
            raise StorageError(f"error scanning group: {e}") from e
        return group_id or 0

    def create_group(self, name: str) -> int:
        group = Group(name=name)
        try:
            with transaction(self.session):
                self.session.add(group)
                self.session.flush()
                group_id = group.id
        except SQLAlchemyError as e:
            raise StorageError(f"error inserting group: {e}") from e
        logger.info(f"Created group '{name}' (id={group_id})")
        return group_id

    def get_or_create_group(self, name: str) -> int:
        """
        名前でグループを取得し、なければ作成する。
        同時作成で一意制約に負けた場合は作成済みの ID を読み直す。
        """
        group_id = self.get_group_id_by_name(name)
        if group_id:
            return group_id

        try:
            return self.create_group(name)
        except StorageError as e:
            if not isinstance(e.__cause__, IntegrityError):
                raise
            group_id = self.get_group_id_by_name(name)
            if not group_id:
                raise
            logger.info(f"Group '{name}' was created concurrently, reusing id={group_id}")
            return group_id

    def get_song_by_id(self, song_id: int) -> Optional[Song]:
        try:
            return self.session.get(Song, song_id)
        except SQLAlchemyError as e:
            raise StorageError(f"error scanning song: {e}") from e

    def get_song_details_by_song_id(self, song_id: int) -> Optional[SongDetails]:
        try:
            return self.session.exec(
                select(SongDetails).where(SongDetails.song_id == song_id)
            ).first()
        except SQLAlchemyError as e:
            raise StorageError(f"error scanning song details: {e}") from e

    def update_song(self, song: Song, details: SongDetails) -> None:
        """songs と song_details の UPDATE を1トランザクションで実行する"""
        try:
            with transaction(self.session):
                self.session.add(song)
                self.session.flush()
                self.session.add(details)
                self.session.flush()
        except SQLAlchemyError as e:
            raise StorageError(f"error updating song: {e}") from e

    def create_song_with_details(self, song: Song, details: SongDetails) -> Song:
        """song を INSERT して生成された ID で song_details を INSERT する (1トランザクション)"""
        try:
            with transaction(self.session):
                self.session.add(song)
                self.session.flush()
                details.song_id = song.id
                self.session.add(details)
                self.session.flush()
        except SQLAlchemyError as e:
            raise StorageError(f"failed to insert song: {e}") from e

        self.session.refresh(song)
        return song
