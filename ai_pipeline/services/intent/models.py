"""의도 분류 데이터 모델"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from ai_pipeline.errors import ConfigurationError

UNKNOWN_INTENT = "unknown"


class ClassificationMethod(str, Enum):
    """분류 방식"""

    KEYWORD = "keyword"  # 키워드 점수 기반
    LLM = "llm"  # 모델 기반 폴백


@dataclass(frozen=True)
class IntentPattern:
    """카테고리 + 키워드 목록"""

    category: str
    keywords: tuple[str, ...]

    def __post_init__(self):
        # list로 넘겨도 불변 튜플로 보관
        object.__setattr__(self, "keywords", tuple(self.keywords))
        if not self.category or not self.category.strip():
            raise ConfigurationError("의도 카테고리 이름이 비어 있습니다")
        if not self.keywords:
            raise ConfigurationError(f"'{self.category}' 카테고리에 키워드가 없습니다")
        if any(not isinstance(kw, str) or not kw.strip() for kw in self.keywords):
            raise ConfigurationError(f"'{self.category}' 카테고리에 빈 키워드가 있습니다")


def _frozen(mapping: Mapping | None) -> Mapping:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class IntentConfig:
    """키워드 분류기 설정 (생성 후 읽기 전용)"""

    patterns: tuple[IntentPattern, ...]
    tones: Mapping[str, str] = field(default_factory=dict)
    deep_links: Mapping[str, str] = field(default_factory=dict)
    requires_auth: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self):
        patterns = tuple(
            p if isinstance(p, IntentPattern) else IntentPattern(p["category"], p["keywords"])
            for p in self.patterns
        )
        if not patterns:
            raise ConfigurationError("의도 패턴이 하나 이상 필요합니다")

        categories = [p.category for p in patterns]
        duplicates = sorted({c for c in categories if categories.count(c) > 1})
        if duplicates:
            raise ConfigurationError(f"중복된 의도 카테고리: {', '.join(duplicates)}")

        object.__setattr__(self, "patterns", patterns)
        object.__setattr__(self, "tones", _frozen(self.tones))
        object.__setattr__(self, "deep_links", _frozen(self.deep_links))
        object.__setattr__(self, "requires_auth", frozenset(self.requires_auth))

    @property
    def categories(self) -> list[str]:
        return [p.category for p in self.patterns]

    def metadata_for(self, category: str) -> dict:
        """카테고리별 메타데이터 (tone, deep_link, requires_auth)"""
        metadata = {}
        if category in self.tones:
            metadata["tone"] = self.tones[category]
        if category in self.deep_links:
            metadata["deep_link"] = self.deep_links[category]
        if category in self.requires_auth:
            metadata["requires_auth"] = True
        return metadata


@dataclass
class IntentResult:
    """의도 분류 결과"""

    intent: str
    confidence: float = 0.0  # 0.0 ~ 1.0
    matched_keywords: list[str] = field(default_factory=list)
    method: ClassificationMethod = ClassificationMethod.KEYWORD
    metadata: dict = field(default_factory=dict)

    def __post_init__(self):
        self.confidence = min(1.0, max(0.0, float(self.confidence)))

    @property
    def is_unknown(self) -> bool:
        return self.intent == UNKNOWN_INTENT

    @property
    def tone(self) -> str | None:
        return self.metadata.get("tone")


def unknown_intent(method: ClassificationMethod = ClassificationMethod.KEYWORD, **metadata) -> IntentResult:
    """분류 불가 결과"""
    return IntentResult(
        intent=UNKNOWN_INTENT,
        confidence=0.0,
        matched_keywords=[],
        method=method,
        metadata=dict(metadata),
    )
