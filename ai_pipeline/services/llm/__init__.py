"""생성 백엔드 (LLM) 서비스"""

from .base import BaseLLMService, LLMResponse, LLMStream, Message
from .dummy_llm import DummyLLM
from .factory import ProviderConfig, create_llm_service, get_llm_service

__all__ = [
    "BaseLLMService",
    "LLMResponse",
    "LLMStream",
    "Message",
    "DummyLLM",
    "ProviderConfig",
    "create_llm_service",
    "get_llm_service",
]
