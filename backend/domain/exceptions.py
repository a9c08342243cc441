from typing import Optional

# API で返すエラーはすべて SongLibraryError を継承し、HTTP ステータスを持つ。
# main.py のハンドラが str(error) を {"error": "..."} に詰めて返す。

class SongLibraryError(Exception):
    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def __str__(self) -> str:
        return self.message

class InvalidInputError(SongLibraryError):
    """クエリ / ボディ / パスの入力が不正 (400)"""
    status_code = 400

class NotFoundError(SongLibraryError):
    """楽曲・歌詞・ページが存在しない (404)"""
    status_code = 404

class StorageError(SongLibraryError):
    """DB 操作またはトランザクションの失敗 (500)"""
    status_code = 500

class UpstreamError(SongLibraryError):
    """外部メタデータAPIの失敗 (500)"""
    status_code = 500
