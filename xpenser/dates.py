import re
import unicodedata
from datetime import date, datetime
from typing import Union

from .errors import InvalidDateFormat

XPENSER_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

# 先に一致したものを採用する。スラッシュ区切りは米国式（月/日）を優先
DATE_FORMATS = [
    "%Y%m%d",
    "%m/%d/%Y",
    "%m/%d/%y",
    "%Y/%m/%d",
    "%m-%d-%Y",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%SZ",
    "%Y-%m-%d %H:%M:%S",
    "%d %b %Y",
    "%d %B %Y",
    "%b %d %Y",
    "%B %d %Y",
    "%b %d, %Y",
    "%B %d, %Y",
]


def parse_date(text: str) -> datetime:
    """日付文字列を DATE_FORMATS の順に解析する。ISO 8601 もフォールバックで受け付ける"""
    # 全角数字などは NFKC で半角にそろえる
    s = unicodedata.normalize("NFKC", text).strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(s, fmt)
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(s.replace("Z", "+00:00"))
    except ValueError:
        raise InvalidDateFormat(f"Could not turn {text} into an xpenser formatted date") from None


def format_xpenser_date(value: Union[str, date, datetime]) -> str:
    """日付を xpenser の YYYY-MM-DD 形式に変換する

    例:
        format_xpenser_date("20080924")    -> "2008-09-24"
        format_xpenser_date("2010-05-21")  -> "2010-05-21"
        format_xpenser_date("05/03/2010")  -> "2010-05-03"
        format_xpenser_date("jello")       -> InvalidDateFormat

    既に YYYY-MM-DD 形式の文字列はそのまま返す。
    """
    if isinstance(value, (date, datetime)):
        parsed = value
    elif isinstance(value, str):
        if XPENSER_DATE_PATTERN.fullmatch(value):
            return value
        parsed = parse_date(value)
    else:
        raise InvalidDateFormat(f"Could not turn {value!r} into an xpenser formatted date")

    formatted = parsed.strftime("%Y-%m-%d")
    # 4桁未満の年は %Y がゼロ埋めされない環境がある
    if not XPENSER_DATE_PATTERN.fullmatch(formatted):
        raise InvalidDateFormat(f"The parsed date is {formatted} and is not correctly formatted")
    return formatted
