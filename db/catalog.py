import json
import random
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from loguru import logger

from config import CATALOG_PATH, CATALOG_SEED
from matching.filters import apply_filter
from models.major import Major, MajorRecommendationFilter


def estimate_admission_probability(ranking: Optional[int], rng: random.Random) -> Optional[int]:
    """按预估位次估算录取概率(%)，位次越靠前概率越高"""
    if ranking is None:
        return None
    if ranking <= 50:
        return 95 + rng.randrange(5)
    if ranking <= 100:
        return 90 + rng.randrange(5)
    if ranking <= 250:
        return 85 + rng.randrange(5)
    if ranking <= 500:
        return 80 + rng.randrange(5)
    if ranking <= 1000:
        return 70 + rng.randrange(10)
    if ranking <= 2000:
        return 60 + rng.randrange(10)
    if ranking <= 5000:
        return 45 + rng.randrange(15)
    if ranking <= 10000:
        return 30 + rng.randrange(15)
    if ranking <= 20000:
        return 15 + rng.randrange(15)
    return max(1, 15 - ranking // 5000)


class MajorCatalog:
    """
    只读的专业录取数据集。

    进程启动时构建一次，之后不再修改，可被任意多个请求同时读取。
    """

    def __init__(self, majors: Iterable[Major]):
        self._majors: Tuple[Major, ...] = tuple(majors)
        index: Dict[Tuple[str, str], Major] = {}
        for major in self._majors:
            if major.key in index:
                raise ValueError(f"重复的专业记录: {major.university} / {major.major_code}")
            index[major.key] = major
        self._index = MappingProxyType(index)

    def __len__(self) -> int:
        return len(self._majors)

    def __iter__(self) -> Iterator[Major]:
        return iter(self._majors)

    def all(self) -> List[Major]:
        return list(self._majors)

    def list_by_filter(self, major_filter: Optional[MajorRecommendationFilter] = None) -> List[Major]:
        """返回满足全部筛选条件的专业，没有匹配时返回空列表"""
        return apply_filter(self._majors, major_filter)

    def get_by_key(self, major_code: str, university: str) -> Optional[Major]:
        """按 (专业代码, 院校) 精确查找，找不到返回 None"""
        return self._index.get((university, major_code))

    def distinct(self, field_name: str) -> List[str]:
        values = []
        for major in self._majors:
            value = getattr(major, field_name)
            if value is not None and value not in values:
                values.append(value)
        return values


def load_catalog(path: Path = CATALOG_PATH, seed: int = CATALOG_SEED) -> MajorCatalog:
    """读取 JSON 数据并用固定种子计算录取概率，同一种子结果相同"""
    with open(path, "r", encoding="utf-8") as f:
        records = json.load(f)

    rng = random.Random(seed)
    majors = []
    for record in records:
        major = Major.model_validate(record)
        if record.get("admissionProbability") is None:
            probability = estimate_admission_probability(major.estimated_ranking_2025, rng)
            major = major.model_copy(update={"admission_probability": probability})
        majors.append(major)

    return MajorCatalog(majors)


# 全局数据集
catalog: Optional[MajorCatalog] = None


def init_catalog(path: Path = CATALOG_PATH, seed: int = CATALOG_SEED) -> MajorCatalog:
    global catalog
    logger.info(f"📚 加载专业数据: {path}")
    catalog = load_catalog(path, seed)
    logger.info(f"✅ 专业数据加载完成，共 {len(catalog)} 条")
    return catalog


def get_catalog() -> MajorCatalog:
    """获取数据集实例，未初始化时先加载"""
    if catalog is None:
        return init_catalog()
    return catalog
