from functools import cmp_to_key, lru_cache
from typing import Iterable, List, Optional

from pypinyin import Style, lazy_pinyin

from exceptions import ValidationError
from models.major import Major, resolve_major_field

DEFAULT_SORT_KEY = "admissionRanking2024"
SORT_DIRECTIONS = ("asc", "desc")


def search_majors(majors: Iterable[Major], query: Optional[str]) -> List[Major]:
    """按专业名称、专业代码、院校、选科要求做不区分大小写的包含匹配"""
    majors = list(majors)
    if not query or not query.strip():
        return majors

    needle = query.strip().casefold()
    results = []
    for major in majors:
        haystacks = [major.major_name, major.major_code, major.university, major.subject_requirements]
        if any(text and needle in text.casefold() for text in haystacks):
            results.append(major)
    return results


@lru_cache(maxsize=4096)
def collation_key(text: str):
    """中文按拼音排序，与浏览器 localeCompare(..., 'zh-CN') 的顺序一致"""
    return " ".join(lazy_pinyin(text, style=Style.TONE3)).casefold(), text


def _compare_values(a, b) -> int:
    if isinstance(a, str) and isinstance(b, str):
        a, b = collation_key(a), collation_key(b)
    if a < b:
        return -1
    if a > b:
        return 1
    return 0


def sort_majors(majors: Iterable[Major], sort_key: Optional[str], direction: str = "asc") -> List[Major]:
    """
    排序，返回新列表。

    空值在升序时排在最后、降序时排在最前；同值保持原有顺序。
    """
    majors = list(majors)
    if not sort_key:
        return majors

    field_name = resolve_major_field(sort_key)
    if field_name is None:
        raise ValidationError(f"不支持的排序字段: {sort_key}")
    if direction not in SORT_DIRECTIONS:
        raise ValidationError(f"不支持的排序方向: {direction}")

    ascending = direction == "asc"
    null_order = 1 if ascending else -1

    def compare(left: Major, right: Major) -> int:
        a = getattr(left, field_name)
        b = getattr(right, field_name)
        if a is None and b is None:
            return 0
        if a is None:
            return null_order
        if b is None:
            return -null_order
        result = _compare_values(a, b)
        return result if ascending else -result

    return sorted(majors, key=cmp_to_key(compare))


def sort_and_search(
    majors: Iterable[Major],
    query: Optional[str] = None,
    sort_key: Optional[str] = DEFAULT_SORT_KEY,
    direction: str = "asc",
) -> List[Major]:
    return sort_majors(search_majors(majors, query), sort_key, direction)
