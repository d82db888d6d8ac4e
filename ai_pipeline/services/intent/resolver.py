"""하이브리드 의도 결정기

키워드 분류를 먼저 실행하고, 신뢰도가 임계값보다 낮을 때만 LLM 분류기를 호출합니다.
임계값은 폴백 호출 여부만 결정하며, 일단 호출되면 LLM 결과가 그대로 채택됩니다.

LLM 분류기 호출이 실패(ClassificationFailure)하면 파이프라인을 중단하지 않고
키워드 결과로 복구합니다. 이때 metadata["llm_fallback_error"]에 실패 사유가 남습니다.
"""

import logging
from dataclasses import replace
from typing import TYPE_CHECKING

from ai_pipeline.errors import ClassificationFailure, ConfigurationError

from .models import ClassificationMethod, IntentResult

if TYPE_CHECKING:
    from .keyword_classifier import KeywordIntentClassifier
    from .llm_classifier import LLMIntentClassifier

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE_THRESHOLD = 0.5


def resolve_intent(
    text: str,
    keyword_classifier: "KeywordIntentClassifier",
    llm_classifier: "LLMIntentClassifier | None" = None,
    confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
) -> IntentResult:
    """키워드 → (필요 시) LLM 순서로 의도 결정

    Args:
        text: 사용자 입력
        keyword_classifier: 키워드 분류기
        llm_classifier: LLM 분류기 (선택)
        confidence_threshold: 이 값 미만일 때만 LLM 분류기 호출

    Returns:
        IntentResult (method="keyword" 또는 "llm")
    """
    keyword_result = keyword_classifier.classify(text)
    keyword_result.method = ClassificationMethod.KEYWORD

    if llm_classifier is None or keyword_result.confidence >= confidence_threshold:
        return keyword_result

    logger.debug(
        "키워드 신뢰도 %.2f < %.2f, LLM 분류기 호출",
        keyword_result.confidence,
        confidence_threshold,
    )
    try:
        llm_result = llm_classifier.classify(text)
    except ClassificationFailure as e:
        logger.warning("LLM 의도 분류 실패, 키워드 결과 사용: %s", e.message)
        return replace(
            keyword_result,
            metadata={**keyword_result.metadata, "llm_fallback_error": e.message},
        )

    llm_result.method = ClassificationMethod.LLM
    return llm_result


class HybridIntentResolver:
    """키워드 + LLM 하이브리드 의도 결정기 (요청 간 공유되는 읽기 전용 구성)"""

    def __init__(
        self,
        keyword_classifier: "KeywordIntentClassifier",
        llm_classifier: "LLMIntentClassifier | None" = None,
        confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
    ):
        if not 0.0 <= confidence_threshold <= 1.0:
            raise ConfigurationError(
                f"confidence_threshold는 0~1 사이여야 합니다: {confidence_threshold}"
            )
        self.keyword_classifier = keyword_classifier
        self.llm_classifier = llm_classifier
        self.confidence_threshold = confidence_threshold

    def resolve(self, text: str) -> IntentResult:
        return resolve_intent(
            text,
            self.keyword_classifier,
            self.llm_classifier,
            self.confidence_threshold,
        )
