"""오케스트레이션 레이어

스테이지 목록을 요청 컨텍스트 위에서 순서대로 실행합니다.

구성:
- RequestContext: 스테이지 사이에서 전달되는 요청 상태 (intent, prompt_context, generation, error)
- Stage: 이름 + 핸들러
- execute_pipeline / Orchestrator: 첫 실패에서 중단하는 순차 실행 엔진
"""

from .engine import Orchestrator, create_pipeline, execute_pipeline
from .models import (
    GenerationResult,
    OrchestrationResult,
    PipelineRequest,
    RequestContext,
    Stage,
    StageOutcome,
    StepError,
)

__all__ = [
    "GenerationResult",
    "OrchestrationResult",
    "PipelineRequest",
    "RequestContext",
    "Stage",
    "StageOutcome",
    "StepError",
    "Orchestrator",
    "create_pipeline",
    "execute_pipeline",
]
