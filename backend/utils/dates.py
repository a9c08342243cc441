from datetime import date, datetime
from typing import Optional, Union

# 外部APIは "16.07.2006" 形式を返すことがあるため両方受け付ける
RELEASE_DATE_FORMATS = ("%Y-%m-%d", "%d.%m.%Y")

def parse_release_date(value: Union[str, date, None]) -> Optional[date]:
    """
    Parse a release date given as ISO (YYYY-MM-DD) or DD.MM.YYYY.
    Empty values return None; anything else unparsable raises ValueError.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    if not isinstance(value, str):
        raise ValueError(f"invalid release date: {value!r}")

    value = value.strip()
    if not value:
        return None

    # "2006-07-16T00:00:00Z" のような日時文字列は日付部分だけ使う
    if "T" in value:
        value = value.split("T", 1)[0]

    for fmt in RELEASE_DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"invalid release date: {value!r}")
