"""애플리케이션 설정 관리"""

from functools import lru_cache
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field
from pydantic import ValidationError as SettingsValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from ai_pipeline.errors import ConfigurationError

# .env 파일 로드
load_dotenv()

ProviderName = Literal["anthropic", "openai", "deepseek", "ollama", "dummy"]


class Settings(BaseSettings):
    """애플리케이션 설정"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # 프로바이더 설정
    ai_provider: ProviderName | None = Field(
        default=None, description="생성 백엔드 (anthropic | openai | deepseek | ollama | dummy)"
    )
    ai_model: str | None = Field(default=None, description="생성 모델명")

    anthropic_api_key: str | None = Field(default=None, description="Anthropic API 키")
    openai_api_key: str | None = Field(default=None, description="OpenAI API 키")
    deepseek_api_key: str | None = Field(default=None, description="DeepSeek API 키")
    deepseek_base_url: str = Field(
        default="https://api.deepseek.com", description="DeepSeek API 주소"
    )
    ollama_base_url: str = Field(
        default="http://localhost:11434", description="Ollama 서버 주소"
    )

    # 생성 파라미터
    temperature: float = Field(default=0.7, description="생성 temperature")
    max_tokens: int = Field(default=1024, description="최대 생성 토큰 수")
    request_timeout: float = Field(default=30.0, description="백엔드 호출 타임아웃 (초)")

    # 의도 분류 설정
    intent_confidence_threshold: float = Field(
        default=0.5, ge=0.0, le=1.0, description="LLM 폴백을 호출하는 키워드 신뢰도 임계값"
    )

    # 앱 설정
    log_level: str = Field(default="INFO", description="로그 레벨")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """환경 변수/.env에서 설정 로드 (최초 1회)

    Raises:
        ConfigurationError: 환경 변수 값이 유효하지 않은 경우
    """
    try:
        return Settings()
    except SettingsValidationError as e:
        raise ConfigurationError(f"잘못된 설정값: {e}") from e


def validate_settings(current: Settings | None = None) -> dict[str, str]:
    """설정 유효성 검사 및 경고 메시지 반환"""
    current = current or get_settings()
    warnings = {}

    if not current.ai_provider:
        warnings["provider"] = (
            "AI_PROVIDER가 필요합니다. (anthropic | openai | deepseek | ollama | dummy)"
        )
        return warnings

    if not current.ai_model and current.ai_provider != "dummy":
        warnings["model"] = "AI_MODEL이 필요합니다. (예: claude-3-5-haiku-20241022, gpt-4o-mini)"

    # API 키 검증
    required_keys = {
        "anthropic": ("anthropic_api_key", "ANTHROPIC_API_KEY"),
        "openai": ("openai_api_key", "OPENAI_API_KEY"),
        "deepseek": ("deepseek_api_key", "DEEPSEEK_API_KEY"),
    }
    if current.ai_provider in required_keys:
        attr, env_name = required_keys[current.ai_provider]
        if not getattr(current, attr):
            warnings["api_key"] = (
                f"{current.ai_provider} 사용을 위해서는 {env_name}가 필요합니다."
            )

    return warnings


def provider_config_from_settings(current: Settings | None = None):
    """설정값으로 ProviderConfig 생성"""
    from ai_pipeline.services.llm.factory import ProviderConfig

    current = current or get_settings()
    api_key = {
        "anthropic": current.anthropic_api_key,
        "openai": current.openai_api_key,
        "deepseek": current.deepseek_api_key,
    }.get(current.ai_provider or "")
    base_url = {
        "deepseek": current.deepseek_base_url,
        "ollama": current.ollama_base_url,
    }.get(current.ai_provider or "")

    return ProviderConfig(
        provider=current.ai_provider or "dummy",
        model=current.ai_model or "dummy-model",
        api_key=api_key,
        base_url=base_url,
        timeout=current.request_timeout,
    )
