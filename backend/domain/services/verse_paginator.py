from typing import List, Optional

VERSE_SEPARATOR = "\n\n"

class VersePaginator:
    """
    歌詞を空行区切りの「節 (verse)」に分割し、1始まりのページ単位で切り出す責務を持つ。
    """

    def __init__(self, text: str):
        self.verses: List[str] = text.split(VERSE_SEPARATOR)

    @staticmethod
    def normalize(page: Optional[int], limit: Optional[int]) -> tuple:
        """page < 1 は 1、limit <= 0 (または未指定) は 1 に丸める"""
        if page is None or page < 1:
            page = 1
        if limit is None or limit <= 0:
            limit = 1
        return page, limit

    def page(self, page: Optional[int], limit: Optional[int]) -> Optional[str]:
        """
        指定ページの節を空行で連結して返す。
        開始位置が節の数を超える場合は None。末尾は節の数で切り詰める。
        """
        page, limit = self.normalize(page, limit)

        start = (page - 1) * limit
        if start >= len(self.verses):
            return None
        end = min(start + limit, len(self.verses))

        return VERSE_SEPARATOR.join(self.verses[start:end])
