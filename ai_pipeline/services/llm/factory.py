"""LLM 서비스 팩토리"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ai_pipeline.errors import ConfigurationError

from .anthropic_llm import AnthropicLLM
from .base import BaseLLMService
from .dummy_llm import DummyLLM
from .openai_llm import OpenAILLM

if TYPE_CHECKING:
    from ai_pipeline.settings import Settings

DEEPSEEK_BASE_URL = "https://api.deepseek.com"
OLLAMA_BASE_URL = "http://localhost:11434"


@dataclass(frozen=True)
class ProviderConfig:
    """생성 백엔드 접속 정보"""

    provider: str
    model: str
    api_key: str | None = None
    base_url: str | None = None
    timeout: float | None = None


def _ollama_openai_url(base_url: str) -> str:
    # Ollama의 OpenAI 호환 엔드포인트는 /v1 아래에 있음
    base_url = base_url.rstrip("/")
    return base_url if base_url.endswith("/v1") else f"{base_url}/v1"


def create_llm_service(config: ProviderConfig) -> BaseLLMService:
    """프로바이더 설정에 맞는 LLM 서비스 반환

    Args:
        config: ProviderConfig

    Returns:
        BaseLLMService 인스턴스

    Raises:
        ConfigurationError: 지원하지 않는 프로바이더이거나 모델명이 비어 있는 경우
    """
    if not config.model:
        raise ConfigurationError("모델명이 비어 있습니다")

    if config.provider == "anthropic":
        return AnthropicLLM(model=config.model, api_key=config.api_key, timeout=config.timeout)
    elif config.provider == "openai":
        return OpenAILLM(
            model=config.model,
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=config.timeout,
        )
    elif config.provider == "deepseek":
        return OpenAILLM(
            model=config.model,
            api_key=config.api_key,
            base_url=config.base_url or DEEPSEEK_BASE_URL,
            timeout=config.timeout,
            provider="deepseek",
        )
    elif config.provider == "ollama":
        # 로컬 Ollama는 API 키를 검사하지 않지만 클라이언트는 값을 요구함
        return OpenAILLM(
            model=config.model,
            api_key=config.api_key or "ollama",
            base_url=_ollama_openai_url(config.base_url or OLLAMA_BASE_URL),
            timeout=config.timeout,
            provider="ollama",
        )
    elif config.provider == "dummy":
        return DummyLLM(model=config.model)
    else:
        raise ConfigurationError(f"지원하지 않는 LLM 제공자: {config.provider}")


def get_llm_service(current: "Settings | None" = None) -> BaseLLMService:
    """설정(기본: 환경 변수)에 따라 LLM 서비스 반환

    Raises:
        ConfigurationError: 설정값이 유효하지 않거나 지원하지 않는 프로바이더인 경우
    """
    from ai_pipeline.settings import provider_config_from_settings

    return create_llm_service(provider_config_from_settings(current))
