"""
专业筛选条件判断

后端初筛（只用地区/专业类别）、结果页二次筛选（全部五个条件）以及大模型工具调用
都使用这里的同一个判断函数。
"""

from typing import Iterable, List, Optional

from models.major import ALL_OPTION, Major, MajorRecommendationFilter

# 学费区间: 5000 属于 5000-10000元，10000 属于 5000-10000元，20000 属于 10000-20000元
TUITION_BUCKETS = {
    "5000元以下": lambda tuition: tuition < 5000,
    "5000-10000元": lambda tuition: 5000 <= tuition <= 10000,
    "10000-20000元": lambda tuition: 10000 < tuition <= 20000,
    "20000元以上": lambda tuition: tuition > 20000,
}


def _is_unconstrained(value) -> bool:
    return value is None or value == "" or value == ALL_OPTION


def _selected(values: Optional[List[str]]) -> List[str]:
    return [v for v in (values or []) if not _is_unconstrained(v)]


def matches_tuition_range(tuition, tuition_range: Optional[str]) -> bool:
    if _is_unconstrained(tuition_range):
        return True
    # 学费未公布的专业不属于任何具体区间
    if tuition is None:
        return False
    in_bucket = TUITION_BUCKETS.get(tuition_range)
    if in_bucket is None:
        return False
    return in_bucket(tuition)


def matches_filter(major: Major, major_filter: Optional[MajorRecommendationFilter]) -> bool:
    """多个条件之间是“且”，多选条件内部是“或”"""
    if major_filter is None:
        return True

    regions = _selected(major_filter.regions)
    if regions and major.region not in regions:
        return False

    categories = _selected(major_filter.major_categories)
    if categories and major.major_category not in categories:
        return False

    if not _is_unconstrained(major_filter.schooling_length) and major.schooling_length != major_filter.schooling_length:
        return False

    if not _is_unconstrained(major_filter.university_tier) and major.university_tier != major_filter.university_tier:
        return False

    return matches_tuition_range(major.tuition, major_filter.tuition_range)


def apply_filter(majors: Iterable[Major], major_filter: Optional[MajorRecommendationFilter]) -> List[Major]:
    return [major for major in majors if matches_filter(major, major_filter)]


def apply_exclusions(
    majors: Iterable[Major],
    excluded_regions: Optional[List[str]] = None,
    excluded_major_categories: Optional[List[str]] = None,
) -> List[Major]:
    """剔除考生明确排除的地区和专业类别"""
    excluded_regions = set(excluded_regions or [])
    excluded_major_categories = set(excluded_major_categories or [])
    return [
        major for major in majors
        if major.region not in excluded_regions and major.major_category not in excluded_major_categories
    ]
