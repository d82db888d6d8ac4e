"""의도 분류

- KeywordIntentClassifier: 설정된 키워드 목록으로 점수 계산 (로컬, 동기)
- LLMIntentClassifier: 닫힌 카테고리 집합에 대한 모델 기반 분류 (폴백)
- HybridIntentResolver: 신뢰도 임계값으로 두 분류기를 결합
"""

from .keyword_classifier import KeywordIntentClassifier
from .llm_classifier import LLMIntentClassifier
from .models import (
    UNKNOWN_INTENT,
    ClassificationMethod,
    IntentConfig,
    IntentPattern,
    IntentResult,
)
from .resolver import HybridIntentResolver, resolve_intent

__all__ = [
    "UNKNOWN_INTENT",
    "ClassificationMethod",
    "IntentConfig",
    "IntentPattern",
    "IntentResult",
    "KeywordIntentClassifier",
    "LLMIntentClassifier",
    "HybridIntentResolver",
    "resolve_intent",
]
