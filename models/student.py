import math

from pydantic import BaseModel, Field, ValidationInfo, field_validator
from typing import List, Optional
from urllib.parse import urlencode

from models.major import SUBJECTS, _split_csv

# 多选字段，在查询字符串中以逗号拼接
LIST_FIELDS = (
    "selectedSubjects",
    "intendedRegions",
    "intendedMajorCategories",
    "excludedRegions",
    "excludedMajorCategories",
)

# 字段名/别名 -> 提示用的中文名
FIELD_LABELS = {
    "gaokaoScore": "考生分数",
    "gaokao_score": "考生分数",
    "provinceRanking": "全省排名",
    "province_ranking": "全省排名",
    "selectedSubjects": "选考科目",
    "selected_subjects": "选考科目",
    "intendedRegions": "意向地区",
    "intended_regions": "意向地区",
    "intendedMajorCategories": "意向专业类别",
    "intended_major_categories": "意向专业类别",
    "excludedRegions": "排除地区",
    "excluded_regions": "排除地区",
    "excludedMajorCategories": "排除专业类别",
    "excluded_major_categories": "排除专业类别",
}


def merge_query_params(params) -> dict:
    """
    查询参数转成字典。

    多选字段既可以逗号拼接(selectedSubjects=物理,化学,生物)，
    也可以重复出现(selectedSubjects=物理&selectedSubjects=化学&...)，两种写法结果相同。
    """
    if not hasattr(params, "getlist"):
        return dict(params)

    merged = {}
    for key in params.keys():
        values = params.getlist(key)
        merged[key] = ",".join(values) if key in LIST_FIELDS else values[-1]
    return merged


class StudentInput(BaseModel):
    """
    考生填写的信息，每次提交生成一次，不做持久化。

    排除地区/排除专业类别会从推荐结果中剔除。
    """

    gaokao_score: float = Field(..., description="高考总分(0-750)", alias="gaokaoScore")
    province_ranking: int = Field(..., description="全省排名位次", alias="provinceRanking")
    selected_subjects: List[str] = Field(..., description="3门选考科目", alias="selectedSubjects")
    intended_regions: Optional[List[str]] = Field(None, description="意向地区", alias="intendedRegions")
    intended_major_categories: Optional[List[str]] = Field(None, description="意向专业类别", alias="intendedMajorCategories")
    excluded_regions: Optional[List[str]] = Field(None, description="排除地区", alias="excludedRegions")
    excluded_major_categories: Optional[List[str]] = Field(None, description="排除专业类别", alias="excludedMajorCategories")

    class Config:
        populate_by_name = True

    @field_validator(
        "selected_subjects",
        "intended_regions",
        "intended_major_categories",
        "excluded_regions",
        "excluded_major_categories",
        mode="before",
    )
    @classmethod
    def split_comma_joined(cls, value, info: ValidationInfo):
        if value is None:
            return None
        try:
            return _split_csv(value) or []
        except ValueError:
            raise ValueError(f"{FIELD_LABELS[info.field_name]}格式不正确")

    @field_validator("gaokao_score")
    @classmethod
    def check_score(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("分数必须是有效数字")
        if value < 0:
            raise ValueError("分数不能为负")
        if value > 750:
            raise ValueError("分数不能超过750")
        return value

    @field_validator("province_ranking")
    @classmethod
    def check_ranking(cls, value: int) -> int:
        if value < 1:
            raise ValueError("排名必须大于0")
        return value

    @field_validator("selected_subjects")
    @classmethod
    def check_subjects(cls, value: List[str]) -> List[str]:
        if len(value) != 3:
            raise ValueError("必须选择 3 个选考科目")
        if len(set(value)) != 3:
            raise ValueError("选考科目不能重复")
        unknown = [s for s in value if s not in SUBJECTS]
        if unknown:
            raise ValueError(f"未知的选考科目: {', '.join(unknown)}")
        return value

    def to_query_params(self) -> dict:
        data = self.model_dump(by_alias=True, exclude_none=True)
        params = {}
        for key, value in data.items():
            if key in LIST_FIELDS:
                if value:
                    params[key] = ",".join(value)
            elif isinstance(value, float) and value.is_integer():
                params[key] = str(int(value))
            else:
                params[key] = str(value)
        return params

    def to_query_string(self) -> str:
        return urlencode(self.to_query_params())
