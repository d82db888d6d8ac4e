"""프롬프트 컨텍스트 최적화"""

from .models import ContextMode, ContextResult, ContextSection, ContextStrategy
from .optimizer import ContextOptimizer, estimate_tokens

__all__ = [
    "ContextMode",
    "ContextResult",
    "ContextSection",
    "ContextStrategy",
    "ContextOptimizer",
    "estimate_tokens",
]
