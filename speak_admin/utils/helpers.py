import math
import re
import unicodedata
from datetime import datetime
from typing import Any, List, Optional, Sequence, Tuple

import pytz

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")

def to_slug(value: Optional[str]) -> str:
    """
    生成URL友好的slug
    小写 -> NFD分解并去掉变音符号 -> 非[a-z0-9]替换为'-' -> 去掉首尾'-'
    """
    if not value:
        return ""
    # đ 没有分解形式，单独折叠
    text = value.lower().replace("đ", "d")
    text = unicodedata.normalize("NFD", text)
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    text = _NON_SLUG_CHARS.sub("-", text)
    return text.strip("-")

def clean_text(value: Optional[str]) -> str:
    """去除首尾空白，None视为空串"""
    return value.strip() if isinstance(value, str) else ""

def normalize_position(value: Any, default: int = 1) -> int:
    """排序位置，非法或非正数时回退为默认值"""
    try:
        position = int(value)
    except (TypeError, ValueError):
        return default
    return position if position > 0 else default

def paginate(items: Sequence[Any], page: int, page_size: int) -> Tuple[List[Any], int, int]:
    """
    内存分页

    Returns:
        (当前页数据, 实际页码, 总页数)，页码超出范围时回到第1页
    """
    total_pages = math.ceil(len(items) / page_size) if page_size > 0 else 0
    if page < 1 or page > total_pages:
        page = 1
    start = (page - 1) * page_size
    return list(items[start:start + page_size]), page, total_pages

def as_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """数据库取出的时间可能不带时区（如SQLite），统一视为UTC"""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return pytz.utc.localize(dt)
    return dt.astimezone(pytz.utc)

def format_timestamp(dt: datetime = None) -> str:
    """格式化时间戳"""
    if not dt:
        dt = datetime.now(pytz.utc)
    return as_utc(dt).isoformat().replace("+00:00", "Z")

