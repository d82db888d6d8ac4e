"""모델 기반 의도 분류기 (LLMIntentClassifier)

닫힌 카테고리 목록 중 하나를 고르도록 생성 백엔드에 요청합니다.
키워드 분류 신뢰도가 낮을 때만 호출되는 폴백 경로입니다.
"""

import json
import logging
import re
from typing import TYPE_CHECKING, Mapping

from ai_pipeline.errors import ClassificationFailure, ConfigurationError, LLMServiceError
from ai_pipeline.services.llm.base import Message

from .models import ClassificationMethod, IntentResult, unknown_intent

if TYPE_CHECKING:
    from ai_pipeline.services.llm.base import BaseLLMService
    from ai_pipeline.services.llm.factory import ProviderConfig

logger = logging.getLogger(__name__)

# 의도 분류용 시스템 프롬프트
INTENT_CLASSIFICATION_PROMPT = """You are an intent classifier for a conversational assistant.
Classify the user's message into exactly ONE of the categories below.

## Categories
{categories}

## Response format (JSON only, no other text)
{{"intent": "<category>", "confidence": <number between 0.0 and 1.0>}}

The "intent" value must be one of: {names}.
"""

_JSON_OBJECT = re.compile(r"\{[^{}]*\}")


class LLMIntentClassifier:
    """LLM 기반 의도 분류기"""

    def __init__(
        self,
        llm_service: "BaseLLMService",
        categories: list[str],
        category_descriptions: Mapping[str, str] | None = None,
        model: str | None = None,
        max_tokens: int = 100,
    ):
        """
        Args:
            llm_service: LLM 서비스 인스턴스
            categories: 선택 가능한 카테고리 목록 (닫힌 집합)
            category_descriptions: 카테고리별 설명
            model: 분류용 모델명 (None이면 서비스 기본 모델)
            max_tokens: 응답 최대 토큰 (짧은 JSON만 필요)

        Raises:
            ConfigurationError: 카테고리 목록이 비었거나 중복된 경우
        """
        categories = list(categories)
        if not categories:
            raise ConfigurationError("LLM 분류기에는 카테고리가 하나 이상 필요합니다")
        if len(set(categories)) != len(categories):
            raise ConfigurationError("LLM 분류기 카테고리가 중복되었습니다")

        self.llm_service = llm_service
        self.categories = tuple(categories)
        self.category_descriptions = dict(category_descriptions or {})
        self.model = model
        self.max_tokens = max_tokens
        self.system_prompt = self._build_prompt()

    @classmethod
    def from_provider(
        cls,
        config: "ProviderConfig",
        categories: list[str],
        category_descriptions: Mapping[str, str] | None = None,
    ) -> "LLMIntentClassifier":
        """프로바이더 설정으로 전용 LLM 서비스를 만들어 분류기 생성"""
        from ai_pipeline.services.llm.factory import create_llm_service

        return cls(create_llm_service(config), categories, category_descriptions)

    def _build_prompt(self) -> str:
        lines = []
        for category in self.categories:
            description = self.category_descriptions.get(category)
            lines.append(f"- **{category}**: {description}" if description else f"- **{category}**")
        return INTENT_CLASSIFICATION_PROMPT.format(
            categories="\n".join(lines),
            names=", ".join(self.categories),
        )

    def classify(self, text: str) -> IntentResult:
        """사용자 입력의 의도를 분류

        Args:
            text: 사용자 입력 텍스트

        Returns:
            IntentResult (method="llm")

        Raises:
            ClassificationFailure: 백엔드 호출 실패 (네트워크/인증/타임아웃)
        """
        messages = [
            Message(role="system", content=self.system_prompt),
            Message(role="user", content=text),
        ]

        try:
            response = self.llm_service.generate(
                messages=messages,
                model=self.model,
                temperature=0,
                max_tokens=self.max_tokens,
            )
        except LLMServiceError as e:
            raise ClassificationFailure(f"의도 분류 호출 실패: {e.message}") from e

        result = self._parse_response(response.content)
        result.metadata["classification_usage"] = dict(response.usage or {})
        result.metadata["classification_model"] = response.model
        return result

    def _parse_response(self, response_text: str) -> IntentResult:
        """LLM 응답을 IntentResult로 파싱

        파싱 실패나 목록에 없는 카테고리는 "unknown"으로 처리합니다.
        """
        try:
            # JSON 추출 (응답에 다른 텍스트가 섞여있을 수 있음)
            json_match = _JSON_OBJECT.search(response_text or "")
            data = json.loads(json_match.group() if json_match else response_text)
            intent = str(data["intent"]).strip()
            confidence = float(data.get("confidence", 0.5))
        except (json.JSONDecodeError, KeyError, TypeError, ValueError):
            logger.warning("의도 분류 응답 파싱 실패: %r", (response_text or "")[:200])
            return unknown_intent(ClassificationMethod.LLM, parse_error=True)

        # 대소문자 차이는 허용
        by_lower = {c.lower(): c for c in self.categories}
        category = by_lower.get(intent.lower())
        if category is None:
            logger.warning("목록에 없는 의도 카테고리: %s", intent)
            return unknown_intent(ClassificationMethod.LLM, parse_error=True, raw_intent=intent)

        return IntentResult(
            intent=category,
            confidence=confidence,
            matched_keywords=[],
            method=ClassificationMethod.LLM,
        )
