import pytest

from db.catalog import MajorCatalog
from matching.filters import apply_exclusions, apply_filter, matches_tuition_range
from models.major import MajorRecommendationFilter


def _names(majors):
    return [(m.university, m.major_name) for m in majors]


@pytest.mark.parametrize("tuition,tuition_range,expected", [
    (4999, "5000元以下", True),
    (5000, "5000元以下", False),
    (5000, "5000-10000元", True),
    (10000, "5000-10000元", True),
    (10000, "10000-20000元", False),
    (10001, "5000-10000元", False),
    (10001, "10000-20000元", True),
    (20000, "10000-20000元", True),
    (20000, "20000元以上", False),
    (20001, "20000元以上", True),
])
def test_tuition_boundaries(tuition, tuition_range, expected):
    assert matches_tuition_range(tuition, tuition_range) is expected


def test_null_tuition_only_matches_unconstrained():
    assert matches_tuition_range(None, None) is True
    assert matches_tuition_range(None, "全部") is True
    for label in ("5000元以下", "5000-10000元", "10000-20000元", "20000元以上"):
        assert matches_tuition_range(None, label) is False


def test_unknown_tuition_label_matches_nothing():
    assert matches_tuition_range(6000, "很便宜") is False


def test_no_filter_returns_everything(sample_majors):
    assert apply_filter(sample_majors, None) == sample_majors
    assert apply_filter(sample_majors, MajorRecommendationFilter()) == sample_majors


def test_all_option_imposes_nothing(sample_majors):
    major_filter = MajorRecommendationFilter(
        regions=["全部"], schooling_length="全部", tuition_range="全部", university_tier="全部"
    )
    assert apply_filter(sample_majors, major_filter) == sample_majors


def test_or_within_regions(sample_majors):
    result = apply_filter(sample_majors, MajorRecommendationFilter(regions=["北京", "上海"]))
    assert _names(result) == [
        ("北京大学", "计算机科学与技术"),
        ("清华大学", "软件工程"),
        ("复旦大学", "临床医学"),
    ]


def test_and_across_fields(sample_majors):
    major_filter = MajorRecommendationFilter(regions=["杭州"], major_categories=["工学"], university_tier="985")
    assert _names(apply_filter(sample_majors, major_filter)) == [("浙江大学", "计算机科学与技术")]

    major_filter = MajorRecommendationFilter(regions=["北京"], major_categories=["医学"])
    assert apply_filter(sample_majors, major_filter) == []


def test_tuition_range_scenario(make_major):
    majors = [make_major(university="A", tuition=5000), make_major(university="B", tuition=20000),
              make_major(university="C", tuition=None)]
    result = apply_filter(majors, MajorRecommendationFilter(tuition_range="5000-10000元"))
    assert [m.university for m in result] == ["A"]


def test_schooling_length(sample_majors):
    result = apply_filter(sample_majors, MajorRecommendationFilter(schooling_length="5年"))
    assert _names(result) == [("复旦大学", "临床医学")]


def test_filter_is_idempotent(sample_majors):
    major_filter = MajorRecommendationFilter(regions=["杭州", "北京"], tuition_range="5000-10000元")
    once = apply_filter(sample_majors, major_filter)
    assert apply_filter(once, major_filter) == once


def test_adding_criteria_never_grows_result(sample_majors):
    loose = MajorRecommendationFilter(regions=["杭州", "北京"])
    tight = MajorRecommendationFilter(regions=["杭州", "北京"], university_tier="985")
    tighter = MajorRecommendationFilter(regions=["杭州", "北京"], university_tier="985", tuition_range="5000元以下")
    loose_result = apply_filter(sample_majors, loose)
    tight_result = apply_filter(sample_majors, tight)
    tighter_result = apply_filter(sample_majors, tighter)
    assert all(m in loose_result for m in tight_result)
    assert all(m in tight_result for m in tighter_result)
    assert _names(tighter_result) == [("浙江大学", "英语")]


def test_catalog_beijing_scenario(make_major):
    majors = []
    for i in range(80):
        region = "北京" if i % 12 == 0 else "杭州"
        majors.append(make_major(university=f"大学{i}", region=region))
    catalog = MajorCatalog(majors)
    beijing = [m for m in majors if m.region == "北京"]
    assert len(catalog) == 80
    assert len(beijing) == 7

    assert catalog.list_by_filter(MajorRecommendationFilter(regions=["北京"])) == beijing


def test_apply_exclusions(sample_majors):
    result = apply_exclusions(sample_majors, excluded_regions=["杭州"], excluded_major_categories=["医学"])
    assert _names(result) == [
        ("北京大学", "计算机科学与技术"),
        ("清华大学", "软件工程"),
        ("宁波诺丁汉大学", "工商管理"),
    ]
    assert apply_exclusions(sample_majors) == sample_majors
