import pytest

from matching.subjects import is_subject_compatible, parse_subject_requirement


@pytest.mark.parametrize("requirement,groups", [
    (None, []),
    ("", []),
    ("不限", []),
    ("不限(艺术)", []),
    ("不限（体育）", []),
    ("物理", [["物理"]]),
    ("物理+化学", [["物理"], ["化学"]]),
    ("物理+化学+生物", [["物理"], ["化学"], ["生物"]]),
    ("历史/政治均可", [["历史", "政治"]]),
    ("物理/化学/生物任选一", [["物理", "化学", "生物"]]),
    ("物理+化学/地理", [["物理"], ["化学", "地理"]]),
])
def test_parse_subject_requirement(requirement, groups):
    assert parse_subject_requirement(requirement) == groups


@pytest.mark.parametrize("selected,requirement,expected", [
    (["物理", "化学", "生物"], "物理+化学", True),
    (["物理", "化学", "生物"], "历史", False),
    (["物理", "化学", "生物"], "不限", True),
    (["物理", "化学", "生物"], None, True),
    (["历史", "地理", "技术"], "历史/政治均可", True),
    (["化学", "地理", "技术"], "历史/政治均可", False),
    (["物理", "地理", "技术"], "物理+化学/地理", True),
    (["物理", "生物", "技术"], "物理+化学/地理", False),
    (["政治", "历史", "生物"], "物理/化学/生物任选一", True),
    (["政治", "历史", "地理"], "物理/化学/生物任选一", False),
    (["技术", "历史", "地理"], "物理/技术均可", True),
])
def test_is_subject_compatible(selected, requirement, expected):
    assert is_subject_compatible(selected, requirement) is expected


def test_unrecognised_subject_never_satisfied():
    assert parse_subject_requirement("音乐") == [["音乐"]]
    assert is_subject_compatible(["物理", "化学", "生物"], "音乐") is False
