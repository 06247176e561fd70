import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

BASE_DIR = Path(__file__).resolve().parent

# 大模型配置（兼容 OpenAI 接口的服务均可，通过 OPENAI_BASE_URL 切换）
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL") or None
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
OPENAI_TEMPERATURE = float(os.getenv("OPENAI_TEMPERATURE", "0.6"))
OPENAI_TIMEOUT = float(os.getenv("OPENAI_TIMEOUT", "60"))
PLACEHOLDER_API_KEY = "your-openai-api-key-here"

# 模型最多可以连续调用几轮 getMajorRecommendations 工具
LLM_MAX_TOOL_ROUNDS = int(os.getenv("LLM_MAX_TOOL_ROUNDS", "5"))

# 推荐模式: llm / filter / auto（auto = 配置了 API Key 时走大模型）
RECOMMENDATION_MODE = os.getenv("RECOMMENDATION_MODE", "auto").lower()

# 专业录取数据
CATALOG_PATH = Path(os.getenv("CATALOG_PATH", BASE_DIR / "db" / "data" / "majors.json"))
CATALOG_SEED = int(os.getenv("CATALOG_SEED", "2025"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

DEFAULT_ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:9002",
]


def is_api_key_configured(api_key) -> bool:
    """API Key 是否已配置（排除空值和示例占位值）"""
    return bool(api_key) and api_key != PLACEHOLDER_API_KEY


def get_allowed_origins():
    allowed_origins = list(DEFAULT_ALLOWED_ORIGINS)

    # Add environment variable for production origins
    if os.getenv("ALLOWED_ORIGINS"):
        additional_origins = [origin.strip() for origin in os.getenv("ALLOWED_ORIGINS").split(",") if origin.strip()]
        allowed_origins.extend(additional_origins)

    # Remove duplicates while preserving order
    seen = set()
    return [x for x in allowed_origins if not (x in seen or seen.add(x))]
