from pydantic import BaseModel, Field
from typing import List, Literal, Optional, Union

# 表示“不限”的选项值，不能当作真实的筛选条件
ALL_OPTION = "全部"

REGIONS = ["北京", "上海", "广东", "浙江", "江苏", "四川", "湖北", "陕西", "山东", "河南"]
MAJOR_CATEGORIES = [
    "哲学", "经济学", "法学", "教育学", "文学", "历史学", "理学",
    "工学", "农学", "医学", "军事学", "管理学", "艺术学",
]
SUBJECTS = ["政治", "历史", "地理", "物理", "化学", "生物", "技术"]
SCHOOLING_LENGTHS = [ALL_OPTION, "4年", "5年", "其他"]
TUITION_RANGES = [ALL_OPTION, "5000元以下", "5000-10000元", "10000-20000元", "20000元以上"]
UNIVERSITY_TIERS = [ALL_OPTION, "985", "211", "双一流", "普通本科", "专科"]

ADMISSION_YEARS = list(range(2017, 2025))

# 分数、学费等数值字段既可能是整数也可能是小数
Number = Union[int, float]


class UniversityDetails(BaseModel):
    university: str = Field(..., description="院校名称")
    region: str = Field(..., description="所在地区/城市")
    province: str = Field(..., description="所在省份")
    university_tier: str = Field(..., description="院校层次: 985/211/双一流/普通本科/专科/艺术类等", alias="universityTier")
    university_level: Literal["本科", "专科"] = Field(..., description="办学层次", alias="universityLevel")
    university_type: Literal["公办", "民办", "中外合作"] = Field(..., description="办学性质", alias="universityType")

    class Config:
        populate_by_name = True
        frozen = True


class AdmissionRecord(BaseModel):
    """某一年的录取分数和位次"""
    year: int
    score: Optional[Number] = None
    ranking: Optional[int] = None


class Major(UniversityDetails):
    major_name: str = Field(..., description="专业名称", alias="majorName")
    major_code: str = Field(..., description="专业代码", alias="majorCode")

    # 历年录取分数/位次，null 表示没有数据，不能当作 0
    admission_score_2017: Optional[Number] = Field(None, alias="admissionScore2017")
    admission_ranking_2017: Optional[int] = Field(None, alias="admissionRanking2017")
    admission_score_2018: Optional[Number] = Field(None, alias="admissionScore2018")
    admission_ranking_2018: Optional[int] = Field(None, alias="admissionRanking2018")
    admission_score_2019: Optional[Number] = Field(None, alias="admissionScore2019")
    admission_ranking_2019: Optional[int] = Field(None, alias="admissionRanking2019")
    admission_score_2020: Optional[Number] = Field(None, alias="admissionScore2020")
    admission_ranking_2020: Optional[int] = Field(None, alias="admissionRanking2020")
    admission_score_2021: Optional[Number] = Field(None, alias="admissionScore2021")
    admission_ranking_2021: Optional[int] = Field(None, alias="admissionRanking2021")
    admission_score_2022: Optional[Number] = Field(None, alias="admissionScore2022")
    admission_ranking_2022: Optional[int] = Field(None, alias="admissionRanking2022")
    admission_score_2023: Optional[Number] = Field(None, alias="admissionScore2023")
    admission_ranking_2023: Optional[int] = Field(None, alias="admissionRanking2023")
    admission_score_2024: Optional[Number] = Field(None, alias="admissionScore2024")
    admission_ranking_2024: Optional[int] = Field(None, alias="admissionRanking2024")
    estimated_ranking_2025: Optional[int] = Field(None, description="2025年预估位次", alias="estimatedRanking2025")

    major_category: str = Field(..., description="专业大类，如工学、理学", alias="majorCategory")
    schooling_length: str = Field(..., description="学制，如4年、5年", alias="schoolingLength")
    tuition: Optional[Number] = Field(None, description="每年学费(元)，艺术类等单独定价的为空")
    subject_requirements: Optional[str] = Field(
        None, description="选科要求，如 物理+化学、物理/历史均可、不限", alias="subjectRequirements"
    )
    has_postgraduate_recommendation: bool = Field(False, description="是否有保研资格", alias="hasPostgraduateRecommendation")
    admission_probability: Optional[Number] = Field(
        None, description="录取概率(0-100)", alias="admissionProbability", ge=0, le=100
    )

    @property
    def key(self):
        """(院校, 专业代码) 组合键，专业代码本身并不唯一"""
        return self.university, self.major_code

    def admission_score(self, year: int) -> Optional[Number]:
        return getattr(self, f"admission_score_{year}")

    def admission_ranking(self, year: int) -> Optional[int]:
        return getattr(self, f"admission_ranking_{year}")

    def admission_history(self) -> List[AdmissionRecord]:
        """历年录取数据，按年份从新到旧"""
        return [
            AdmissionRecord(year=year, score=self.admission_score(year), ranking=self.admission_ranking(year))
            for year in reversed(ADMISSION_YEARS)
        ]


# 前端/查询参数使用的字段名 -> 模型属性名
MAJOR_FIELD_BY_ALIAS = {
    (field.alias or name): name for name, field in Major.model_fields.items()
}


def resolve_major_field(key: str) -> Optional[str]:
    """把 admissionRanking2024 / admission_ranking_2024 统一解析成属性名"""
    if key in Major.model_fields:
        return key
    return MAJOR_FIELD_BY_ALIAS.get(key)


def tier_badges(tier: Optional[str]) -> List[str]:
    """院校层次徽章: 985 同时是 211 和双一流，211 同时是双一流"""
    if not tier:
        return []
    if tier == "985":
        return ["985", "211", "双一流"]
    if tier == "211":
        return ["211", "双一流"]
    return [tier]


def _split_csv(value) -> Optional[List[str]]:
    """逗号分隔的字符串或列表，其他类型报 ValueError"""
    if value is None:
        return None
    if isinstance(value, str):
        items = [s.strip() for s in value.split(",") if s.strip()]
    elif isinstance(value, (list, tuple)):
        items = [str(s).strip() for s in value if str(s).strip()]
    else:
        raise ValueError("应为逗号分隔的字符串或列表")
    return items or None


class MajorRecommendationFilter(BaseModel):
    """专业筛选条件，所有字段可选；未填写的字段不做限制"""
    regions: Optional[List[str]] = Field(None, description="意向地区列表")
    major_categories: Optional[List[str]] = Field(None, description="意向专业类别列表", alias="majorCategories")
    schooling_length: Optional[str] = Field(None, description="学制，如 4年", alias="schoolingLength")
    tuition_range: Optional[str] = Field(None, description="学费区间，如 5000-10000元", alias="tuitionRange")
    university_tier: Optional[str] = Field(None, description="院校层次，如 985", alias="universityTier")

    class Config:
        populate_by_name = True

    @classmethod
    def from_query_params(cls, params) -> "MajorRecommendationFilter":
        """从查询参数构建，多选字段使用逗号分隔"""
        return cls(
            regions=_split_csv(params.get("regions")),
            major_categories=_split_csv(params.get("majorCategories")),
            schooling_length=params.get("schoolingLength") or None,
            tuition_range=params.get("tuitionRange") or None,
            university_tier=params.get("universityTier") or None,
        )

    def to_query_params(self) -> dict:
        params = {}
        if self.regions:
            params["regions"] = ",".join(self.regions)
        if self.major_categories:
            params["majorCategories"] = ",".join(self.major_categories)
        for alias, value in (
            ("schoolingLength", self.schooling_length),
            ("tuitionRange", self.tuition_range),
            ("universityTier", self.university_tier),
        ):
            if value and value != ALL_OPTION:
                params[alias] = value
        return params
