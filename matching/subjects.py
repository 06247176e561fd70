"""
选科要求匹配

选科要求是给人看的文字，例如:
    物理                    必须选物理
    物理+化学               物理和化学都要选
    历史/政治均可           历史、政治选一门即可
    物理/化学/生物任选一    三门中选一门即可
    物理+化学/地理          必须选物理，化学和地理中再选一门
    不限、不限(艺术)        没有要求

“+” 连接的每一组都必须满足，组内用 “/” 分隔的科目满足其一即可。
"""

import re
from typing import Iterable, List, Optional

from models.major import SUBJECTS

NO_REQUIREMENT = "不限"
QUALIFIERS = ("任选其一", "任选一", "选其一", "选一", "均可", "皆可", "之一")
_NOTE_PATTERN = re.compile(r"[（(][^）)]*[）)]")
_GROUP_SEPARATOR = re.compile(r"[+＋]")
_OPTION_SEPARATOR = re.compile(r"[/／、或]")


def parse_subject_requirement(requirement: Optional[str]) -> List[List[str]]:
    """
    解析成 [[必选组1的可选科目], [必选组2的可选科目], ...]，空列表表示没有要求。

    组内出现无法识别的科目时原样保留，匹配时不会被任何考生满足。
    """
    if requirement is None:
        return []
    text = _NOTE_PATTERN.sub("", requirement).replace(" ", "").strip()
    if not text or text.startswith(NO_REQUIREMENT):
        return []

    groups = []
    for raw_group in _GROUP_SEPARATOR.split(text):
        for qualifier in QUALIFIERS:
            raw_group = raw_group.replace(qualifier, "")
        options = [option for option in _OPTION_SEPARATOR.split(raw_group) if option]
        if options:
            groups.append(options)
    return groups


def is_subject_compatible(selected_subjects: Iterable[str], requirement: Optional[str]) -> bool:
    selected = set(selected_subjects)
    for options in parse_subject_requirement(requirement):
        if not any(option in SUBJECTS and option in selected for option in options):
            return False
    return True
