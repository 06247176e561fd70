from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional

from loguru import logger

from db.catalog import MajorCatalog, get_catalog
from exceptions import NotFoundError, RecommendationError
from matching.filters import apply_filter
from matching.search import DEFAULT_SORT_KEY, sort_and_search
from models.major import (
    MAJOR_CATEGORIES,
    REGIONS,
    SCHOOLING_LENGTHS,
    SUBJECTS,
    TUITION_RANGES,
    UNIVERSITY_TIERS,
    MajorRecommendationFilter,
    tier_badges,
)
from models.recommendation import MajorDetailResponse, MajorListResponse, RefineRequest

router = APIRouter()


@router.get("", response_model=MajorListResponse, response_model_by_alias=True)
async def list_majors(
    regions: Optional[str] = Query(None, description="地区，逗号分隔"),
    major_categories: Optional[str] = Query(None, alias="majorCategories", description="专业类别，逗号分隔"),
    schooling_length: Optional[str] = Query(None, alias="schoolingLength", description="学制"),
    tuition_range: Optional[str] = Query(None, alias="tuitionRange", description="学费区间"),
    university_tier: Optional[str] = Query(None, alias="universityTier", description="院校层次"),
    search: Optional[str] = Query(None, description="按专业名称/代码/院校/选科要求搜索"),
    sort_key: Optional[str] = Query(DEFAULT_SORT_KEY, alias="sortKey", description="排序字段，为空时不排序"),
    sort_direction: str = Query("asc", alias="sortDirection", description="asc 或 desc"),
    catalog: MajorCatalog = Depends(get_catalog),
):
    """按筛选条件列出专业，再做搜索和排序"""
    try:
        major_filter = MajorRecommendationFilter.from_query_params({
            "regions": regions,
            "majorCategories": major_categories,
            "schoolingLength": schooling_length,
            "tuitionRange": tuition_range,
            "universityTier": university_tier,
        })
        majors = sort_and_search(catalog.list_by_filter(major_filter), search, sort_key, sort_direction)
        return MajorListResponse(total=len(majors), majors=majors)
    except RecommendationError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    except Exception as e:
        logger.error(f"❌ 查询专业列表失败: {e}")
        raise HTTPException(status_code=500, detail=f"查询专业列表失败: {str(e)}")


@router.post("/refine", response_model=MajorListResponse, response_model_by_alias=True)
async def refine_majors(request: RefineRequest):
    """对前端已有的候选列表（例如大模型推荐结果）做二次筛选、搜索和排序"""
    try:
        majors = apply_filter(request.majors, request.filter)
        majors = sort_and_search(majors, request.search, request.sort_key, request.sort_direction)
        return MajorListResponse(total=len(majors), majors=majors)
    except RecommendationError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    except Exception as e:
        logger.error(f"❌ 筛选专业失败: {e}")
        raise HTTPException(status_code=500, detail=f"筛选专业失败: {str(e)}")


@router.get("/options")
async def get_options(catalog: MajorCatalog = Depends(get_catalog)):
    """表单和筛选栏的可选项"""
    return {
        "regions": REGIONS,
        "catalogRegions": catalog.distinct("region"),
        "majorCategories": MAJOR_CATEGORIES,
        "subjects": SUBJECTS,
        "schoolingLengths": SCHOOLING_LENGTHS,
        "tuitionRanges": TUITION_RANGES,
        "universityTiers": UNIVERSITY_TIERS,
    }


def get_major_detail(catalog: MajorCatalog, university: str, major_code: str) -> MajorDetailResponse:
    major = catalog.get_by_key(major_code, university)
    if major is None:
        raise NotFoundError(f'未找到院校 "{university}" 的专业代码为 "{major_code}" 的详细信息。')
    return MajorDetailResponse(
        major=major,
        tier_badges=tier_badges(major.university_tier),
        admission_history=major.admission_history(),
    )


@router.get("/{university}/{major_code}", response_model=MajorDetailResponse, response_model_by_alias=True)
async def get_major(university: str, major_code: str, catalog: MajorCatalog = Depends(get_catalog)):
    """专业详情页"""
    try:
        return get_major_detail(catalog, university, major_code)
    except RecommendationError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
