"""컨텍스트 최적화 데이터 모델"""

from dataclasses import dataclass
from enum import Enum

from ai_pipeline.errors import ConfigurationError


class ContextMode(str, Enum):
    """섹션 포함 정책"""

    FULL = "full"  # 모든 섹션 포함
    SELECTIVE = "selective"  # alwaysInclude + 토픽이 겹치는 섹션만


@dataclass(frozen=True)
class ContextSection:
    """프롬프트에 포함될 수 있는 지식 섹션

    priority는 향후 정렬 기준으로 예약된 값이며 현재는 포함 순서에 영향을 주지 않습니다.
    """

    id: str
    name: str
    content: str
    topics: tuple[str, ...] = ()
    always_include: bool = False
    priority: int | None = None

    def __post_init__(self):
        object.__setattr__(self, "topics", tuple(self.topics or ()))
        if not self.id or not self.id.strip():
            raise ConfigurationError(f"섹션 id가 비어 있습니다: {self.name!r}")

    def matches(self, topics: frozenset[str]) -> bool:
        return any(topic in topics for topic in self.topics)


@dataclass(frozen=True)
class ContextStrategy:
    """첫 메시지 / 후속 메시지별 모드"""

    first_message: ContextMode = ContextMode.FULL
    follow_up: ContextMode = ContextMode.SELECTIVE

    def __post_init__(self):
        try:
            object.__setattr__(self, "first_message", ContextMode(self.first_message))
            object.__setattr__(self, "follow_up", ContextMode(self.follow_up))
        except ValueError as e:
            raise ConfigurationError(f"알 수 없는 컨텍스트 모드: {e}") from e

    def mode_for(self, is_first_message: bool) -> ContextMode:
        return self.first_message if is_first_message else self.follow_up


@dataclass(frozen=True)
class ContextResult:
    """조립된 시스템 프롬프트와 포함 통계"""

    system_prompt: str
    sections_included: tuple[str, ...]
    total_sections: int
    token_estimate: int
    max_token_estimate: int
    mode: ContextMode = ContextMode.FULL

    @property
    def savings_ratio(self) -> float:
        """전체 조립 대비 절감된 토큰 비율 (0.0 ~ 1.0)"""
        if not self.max_token_estimate:
            return 0.0
        return 1.0 - self.token_estimate / self.max_token_estimate
