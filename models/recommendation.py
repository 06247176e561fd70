from pydantic import BaseModel, Field
from typing import List, Literal, Optional

from models.major import AdmissionRecord, Major, MajorRecommendationFilter, Number


class RecommendedMajor(BaseModel):
    """大模型输出中的单个专业，2022-2024 年分数位次必须给出，没有数据时为 null"""
    major_name: str = Field(..., alias="majorName")
    major_code: str = Field(..., alias="majorCode")
    university: str
    admission_score_2022: Optional[Number] = Field(..., alias="admissionScore2022")
    admission_ranking_2022: Optional[Number] = Field(..., alias="admissionRanking2022")
    admission_score_2023: Optional[Number] = Field(..., alias="admissionScore2023")
    admission_ranking_2023: Optional[Number] = Field(..., alias="admissionRanking2023")
    admission_score_2024: Optional[Number] = Field(..., alias="admissionScore2024")
    admission_ranking_2024: Optional[Number] = Field(..., alias="admissionRanking2024")
    region: Optional[str] = None
    major_category: Optional[str] = Field(None, alias="majorCategory")
    schooling_length: Optional[str] = Field(None, alias="schoolingLength")
    tuition: Optional[Number] = None
    university_tier: Optional[str] = Field(None, alias="universityTier")
    subject_requirements: Optional[str] = Field(None, alias="subjectRequirements")

    class Config:
        populate_by_name = True


class RecommendationOutput(BaseModel):
    """大模型最终回答必须满足的结构"""
    recommended_majors: List[RecommendedMajor] = Field(..., alias="recommendedMajors")
    reasoning: str = Field(..., min_length=1)

    class Config:
        populate_by_name = True


class RecommendationResult(BaseModel):
    """推荐结果，大模型和纯筛选两种方式返回同样的结构"""
    recommended_majors: List[Major] = Field(..., description="推荐专业列表", alias="recommendedMajors")
    reasoning: str = Field(..., description="推荐理由或说明")
    source: Literal["llm", "filter"] = Field(..., description="结果来源: llm=大模型, filter=条件筛选")

    class Config:
        populate_by_name = True


class MajorListResponse(BaseModel):
    total: int
    majors: List[Major]


class RefineRequest(BaseModel):
    """在前端已有的候选列表上做二次筛选/搜索/排序"""
    majors: List[Major]
    filter: Optional[MajorRecommendationFilter] = None
    search: Optional[str] = None
    sort_key: Optional[str] = Field("admissionRanking2024", alias="sortKey")
    sort_direction: Literal["asc", "desc"] = Field("asc", alias="sortDirection")

    class Config:
        populate_by_name = True


class MajorDetailResponse(BaseModel):
    major: Major
    tier_badges: List[str] = Field(..., alias="tierBadges")
    admission_history: List[AdmissionRecord] = Field(..., alias="admissionHistory")

    class Config:
        populate_by_name = True
