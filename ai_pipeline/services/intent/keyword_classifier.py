"""키워드 기반 의도 분류기

설정된 키워드 목록으로 카테고리별 점수를 계산합니다. 네트워크 호출이 없어 항상 먼저 실행됩니다.
"""

from .models import ClassificationMethod, IntentConfig, IntentPattern, IntentResult, unknown_intent


class KeywordIntentClassifier:
    """키워드 매칭 의도 분류기"""

    def __init__(self, config: IntentConfig | list[IntentPattern]):
        """
        Args:
            config: IntentConfig 또는 IntentPattern 리스트

        Raises:
            ConfigurationError: 패턴 설정이 잘못된 경우
        """
        if not isinstance(config, IntentConfig):
            config = IntentConfig(patterns=tuple(config))
        self.config = config
        # 소문자 키워드는 생성 시 한 번만 계산
        self._lowered = tuple(
            (pattern, tuple(kw.lower() for kw in pattern.keywords))
            for pattern in config.patterns
        )

    def classify(self, text: str) -> IntentResult:
        """사용자 입력의 의도를 분류

        대소문자를 무시한 부분 문자열 포함 여부로 키워드를 매칭하고,
        매칭 수가 가장 많은 카테고리를 선택합니다. 동점이면 먼저 선언된 카테고리가 이깁니다.

        Args:
            text: 사용자 입력 텍스트

        Returns:
            IntentResult (매칭이 없으면 "unknown", confidence 0)
        """
        lowered = (text or "").lower()

        best_pattern: IntentPattern | None = None
        best_matches: list[str] = []

        for pattern, keywords in self._lowered:
            matches = [
                original
                for original, keyword in zip(pattern.keywords, keywords)
                if keyword in lowered
            ]
            # 엄격히 큰 경우에만 교체 -> 동점은 선언 순서 우선
            if len(matches) > len(best_matches):
                best_pattern = pattern
                best_matches = matches

        if best_pattern is None:
            return unknown_intent()

        return IntentResult(
            intent=best_pattern.category,
            confidence=len(best_matches) / len(best_pattern.keywords),
            matched_keywords=best_matches,
            method=ClassificationMethod.KEYWORD,
            metadata=self.config.metadata_for(best_pattern.category),
        )
