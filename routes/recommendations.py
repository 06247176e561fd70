from fastapi import APIRouter, Body, Depends, HTTPException, Request
from typing import Any, Dict

from loguru import logger

from config import RECOMMENDATION_MODE
from db.catalog import MajorCatalog, get_catalog
from exceptions import RecommendationError
from gpt.client import get_llm_client
from gpt.recommend_majors import recommend_majors
from models.recommendation import RecommendationResult
from models.student import merge_query_params

router = APIRouter()


async def _recommend(input_data: Dict[str, Any], catalog: MajorCatalog, client) -> RecommendationResult:
    try:
        return await recommend_majors(input_data, catalog, client, mode=RECOMMENDATION_MODE)
    except RecommendationError as e:
        logger.warning(f"⚠️ 推荐失败({e.status_code}): {e}")
        raise HTTPException(status_code=e.status_code, detail=str(e))
    except Exception as e:
        logger.exception(f"❌ 获取专业推荐时出错: {e}")
        raise HTTPException(status_code=500, detail=f"获取专业推荐时出错: {str(e)}")


@router.get("", response_model=RecommendationResult, response_model_by_alias=True)
async def recommend_from_query(
    request: Request,
    catalog: MajorCatalog = Depends(get_catalog),
    client=Depends(get_llm_client),
):
    """结果页直接用表单生成的查询字符串请求推荐，多选字段用逗号分隔或重复传参"""
    return await _recommend(merge_query_params(request.query_params), catalog, client)


@router.post("", response_model=RecommendationResult, response_model_by_alias=True)
async def recommend_from_body(
    payload: Dict[str, Any] = Body(...),
    catalog: MajorCatalog = Depends(get_catalog),
    client=Depends(get_llm_client),
):
    return await _recommend(payload, catalog, client)
