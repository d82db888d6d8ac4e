"""오케스트레이션 데이터 모델"""

from dataclasses import dataclass, field, replace
from typing import Callable, Optional

from ai_pipeline.errors import ConfigurationError
from ai_pipeline.services.context.models import ContextResult
from ai_pipeline.services.intent.models import IntentResult
from ai_pipeline.services.llm.base import Message


@dataclass
class PipelineRequest:
    """파이프라인 입력 (대화 메시지 + 메타데이터)"""

    messages: list[Message]
    metadata: dict = field(default_factory=dict)

    def user_messages(self) -> list[Message]:
        return [m for m in self.messages if m.role == "user"]

    def last_user_message(self) -> Message | None:
        for msg in reversed(self.messages):
            if msg.role == "user":
                return msg
        return None


@dataclass
class GenerationResult:
    """생성 스테이지 결과"""

    text: str
    usage: dict = field(default_factory=dict)
    model: str | None = None
    metadata: dict = field(default_factory=dict)


@dataclass(frozen=True)
class StepError:
    """파이프라인 실패 정보"""

    message: str
    step: str | None = None
    status_code: int | None = None
    cause: BaseException | None = None

    def with_step(self, step: str) -> "StepError":
        """step이 비어 있으면 채운 사본 반환"""
        return self if self.step else replace(self, step=step)


@dataclass
class RequestContext:
    """스테이지 사이에서 전달되는 요청 컨텍스트

    스테이지 간 계약은 이름 있는 슬롯(intent, prompt_context, generation)으로 표현합니다.
    error가 설정되면 이후 스테이지는 실행되지 않습니다.
    """

    request: PipelineRequest
    intent: Optional[IntentResult] = None
    prompt_context: Optional[ContextResult] = None
    generation: Optional[GenerationResult] = None
    error: Optional[StepError] = None

    @classmethod
    def from_messages(cls, messages: list[Message], **metadata) -> "RequestContext":
        return cls(request=PipelineRequest(messages=list(messages), metadata=dict(metadata)))

    @property
    def has_error(self) -> bool:
        return self.error is not None


StageHandler = Callable[[RequestContext], RequestContext]


@dataclass(frozen=True)
class Stage:
    """파이프라인 단계 (이름 + 핸들러)"""

    name: str
    handler: StageHandler

    def __post_init__(self):
        if not self.name:
            raise ConfigurationError("스테이지 이름이 비어 있습니다")
        if not callable(self.handler):
            raise ConfigurationError(f"스테이지 핸들러가 호출 가능하지 않습니다: {self.name}")


@dataclass
class StageOutcome:
    """단일 스테이지 실행 결과"""

    context: RequestContext
    error: StepError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class OrchestrationResult:
    """파이프라인 실행 결과"""

    success: bool
    context: RequestContext
    error: StepError | None = None
