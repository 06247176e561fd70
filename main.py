import sys

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from loguru import logger

from config import LOG_LEVEL, get_allowed_origins
from routes import majors, recommendations
from db.catalog import MajorCatalog, get_catalog, init_catalog
from gpt.client import get_llm_client

logger.remove()
logger.add(sys.stderr, level=LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # 启动时加载专业数据，数据有问题时直接启动失败
    logger.info("🚀 Starting application...")
    init_catalog()
    get_llm_client()
    logger.info("✅ Application startup completed")

    yield

    logger.info("✅ Application shutdown completed")


app = FastAPI(
    title="Gaokao Major Matcher API",
    description="浙江新高考志愿专业推荐系统API",
    version="1.0.0",
    lifespan=lifespan
)

# 配置CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    max_age=3600,
)

# 注册路由
app.include_router(majors.router, prefix="/api/majors", tags=["专业"])
app.include_router(recommendations.router, prefix="/api/recommendations", tags=["推荐"])


@app.get("/")
async def root():
    return {"message": "Gaokao Major Matcher API", "version": "1.0.0"}


@app.get("/health")
async def health_check(catalog: MajorCatalog = Depends(get_catalog), llm_client=Depends(get_llm_client)):
    """Health check endpoint, reports catalog size and whether the LLM is configured"""
    return {
        "status": "healthy",
        "catalog_size": len(catalog),
        "llm_configured": llm_client is not None,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
