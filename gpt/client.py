from typing import Optional

from loguru import logger
from openai import AsyncOpenAI

from config import OPENAI_API_KEY, OPENAI_BASE_URL, OPENAI_TIMEOUT, is_api_key_configured

# 全局大模型客户端
llm_client: Optional[AsyncOpenAI] = None
_client_initialized = False


def create_llm_client(api_key=OPENAI_API_KEY, base_url=OPENAI_BASE_URL, timeout=OPENAI_TIMEOUT) -> Optional[AsyncOpenAI]:
    """API Key 未配置时返回 None，由调用方决定是否改用条件筛选"""
    if not is_api_key_configured(api_key):
        logger.warning("⚠️  OPENAI_API_KEY 未配置，大模型推荐不可用")
        return None

    logger.info(f"🤖 初始化大模型客户端: base_url={base_url or 'default'}, timeout={timeout}")
    return AsyncOpenAI(api_key=api_key, base_url=base_url, timeout=timeout)


def get_llm_client() -> Optional[AsyncOpenAI]:
    global llm_client, _client_initialized
    if not _client_initialized:
        llm_client = create_llm_client()
        _client_initialized = True
    return llm_client
