"""파이프라인 스테이지 핸들러 팩토리"""

from .context import create_context_handler
from .generation import create_generation_handler, create_streaming_generation_handler
from .intent import create_intent_handler
from .moderation import ModerationRule, create_moderation_handler
from .rate_limit import (
    InMemoryRateLimiter,
    RateLimitDecision,
    RateLimiter,
    create_rate_limit_handler,
)

__all__ = [
    "create_context_handler",
    "create_generation_handler",
    "create_streaming_generation_handler",
    "create_intent_handler",
    "ModerationRule",
    "create_moderation_handler",
    "InMemoryRateLimiter",
    "RateLimitDecision",
    "RateLimiter",
    "create_rate_limit_handler",
]
