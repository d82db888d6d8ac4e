"""컨텍스트 최적화기 (ContextOptimizer)

생성 프롬프트에 어떤 지식 섹션을 붙일지 결정합니다.
첫 메시지에는 보통 전체(full), 후속 메시지에는 토픽 기반 선택(selective)을 사용합니다.
"""

import math
from typing import Iterable

from ai_pipeline.errors import ConfigurationError

from .models import ContextMode, ContextResult, ContextSection, ContextStrategy

SECTION_DELIMITER = "\n\n"

# 대략적인 토큰 추정 비율 (문자 4개 ≈ 1토큰)
CHARS_PER_TOKEN = 4


def estimate_tokens(text: str) -> int:
    """텍스트 길이 기반 토큰 수 추정 (정확한 토크나이저가 아님)"""
    return math.ceil(len(text) / CHARS_PER_TOKEN)


class ContextOptimizer:
    """섹션 선택 및 시스템 프롬프트 조립"""

    def __init__(
        self,
        sections: Iterable[ContextSection],
        strategy: ContextStrategy | None = None,
    ):
        """
        Args:
            sections: 선언 순서대로의 섹션 목록
            strategy: 모드 정책 (기본: 첫 메시지 full, 후속 selective)

        Raises:
            ConfigurationError: 섹션 id가 중복된 경우
        """
        self.sections = tuple(sections)
        self.strategy = strategy or ContextStrategy()

        seen: set[str] = set()
        for section in self.sections:
            if section.id in seen:
                raise ConfigurationError(f"중복된 섹션 id: {section.id}")
            seen.add(section.id)

        # 전체 조립 결과는 설정에만 의존하므로 한 번만 계산
        self._full_prompt = SECTION_DELIMITER.join(s.content for s in self.sections)
        self._max_token_estimate = estimate_tokens(self._full_prompt)

    def select(self, topics: Iterable[str], mode: ContextMode) -> list[ContextSection]:
        """모드에 따라 포함할 섹션을 선언 순서대로 반환"""
        if mode == ContextMode.FULL:
            return list(self.sections)

        topic_set = frozenset([topics] if isinstance(topics, str) else topics)
        return [s for s in self.sections if s.always_include or s.matches(topic_set)]

    def build(self, topics: Iterable[str], is_first_message: bool) -> ContextResult:
        """시스템 프롬프트 조립

        Args:
            topics: 현재 메시지의 토픽 (보통 의도 카테고리)
            is_first_message: 대화의 첫 메시지인지 여부

        Returns:
            ContextResult
        """
        mode = self.strategy.mode_for(is_first_message)
        included = self.select(topics, mode)
        system_prompt = SECTION_DELIMITER.join(s.content for s in included)

        return ContextResult(
            system_prompt=system_prompt,
            sections_included=tuple(s.id for s in included),
            total_sections=len(self.sections),
            token_estimate=estimate_tokens(system_prompt),
            max_token_estimate=self._max_token_estimate,
            mode=mode,
        )
