"""오케스트레이션 엔진

순서가 정해진 스테이지 목록을 하나의 RequestContext 위에서 차례로 실행합니다.

- 스테이지 i+1은 스테이지 i가 반환한 컨텍스트를 그대로 받습니다
- context.error가 설정되면 다음 스테이지를 실행하지 않고 실패로 종료합니다
- 핸들러가 던진 예외는 StepError(message, step, cause)로 감싸 파이프라인을 중단합니다
- 성공한 스테이지마다 on_step_complete(step, elapsed_ms)를 호출합니다 (관찰자 예외는 무시)

재시도나 병렬 실행은 하지 않습니다. 이후 스테이지가 앞선 결과(예: intent)에 의존하기 때문입니다.
"""

import logging
import time
from typing import Callable, Iterable, Sequence

from ai_pipeline.errors import PipelineException

from .models import (
    OrchestrationResult,
    RequestContext,
    Stage,
    StageHandler,
    StageOutcome,
    StepError,
)

logger = logging.getLogger(__name__)

StepObserver = Callable[[str, float], None]


def _run_stage(stage: Stage, context: RequestContext) -> StageOutcome:
    """스테이지 하나를 실행하고 명시적인 결과로 변환"""
    try:
        result = stage.handler(context)
    except PipelineException as e:
        return StageOutcome(
            context=context,
            error=StepError(e.message, step=stage.name, status_code=e.status_code, cause=e),
        )
    except Exception as e:
        logger.exception("스테이지 '%s' 처리 중 예외", stage.name)
        return StageOutcome(
            context=context,
            error=StepError(str(e) or type(e).__name__, step=stage.name, cause=e),
        )

    if not isinstance(result, RequestContext):
        return StageOutcome(
            context=context,
            error=StepError(
                f"스테이지 '{stage.name}'가 RequestContext를 반환하지 않았습니다",
                step=stage.name,
            ),
        )
    return StageOutcome(context=result)


def _notify(observer: StepObserver | None, step: str, elapsed_ms: float) -> None:
    if observer is None:
        return
    try:
        observer(step, elapsed_ms)
    except Exception:
        logger.warning("on_step_complete 관찰자 예외 무시 (step=%s)", step, exc_info=True)


def _fail(context: RequestContext, error: StepError) -> OrchestrationResult:
    context.error = error
    logger.warning("파이프라인 실패 (step=%s): %s", error.step, error.message)
    return OrchestrationResult(success=False, context=context, error=error)


def execute_pipeline(
    context: RequestContext,
    stages: Iterable[Stage],
    on_step_complete: StepObserver | None = None,
) -> OrchestrationResult:
    """스테이지를 순서대로 실행

    Args:
        context: 초기 요청 컨텍스트
        stages: 실행할 스테이지 목록
        on_step_complete: 성공한 스테이지마다 호출되는 관찰자 (step_name, elapsed_ms)

    Returns:
        OrchestrationResult (success=False면 error에 실패한 step이 담김)
    """
    last_stage: Stage | None = None

    for stage in stages:
        if context.has_error:
            return _fail(context, context.error.with_step(stage.name))

        logger.debug("스테이지 시작: %s", stage.name)
        started = time.perf_counter()
        outcome = _run_stage(stage, context)
        elapsed_ms = (time.perf_counter() - started) * 1000

        if not outcome.ok:
            return _fail(outcome.context, outcome.error)

        context = outcome.context
        last_stage = stage
        if not context.has_error:
            logger.debug("스테이지 완료: %s (%.1fms)", stage.name, elapsed_ms)
            _notify(on_step_complete, stage.name, elapsed_ms)

    # 마지막 스테이지가 error를 설정한 경우
    if context.has_error:
        step = last_stage.name if last_stage else "pipeline"
        return _fail(context, context.error.with_step(step))

    return OrchestrationResult(success=True, context=context)


class Orchestrator:
    """재사용 가능한 파이프라인 (스테이지 구성은 생성 후 변경하지 않음)"""

    def __init__(
        self,
        stages: Sequence[Stage],
        on_step_complete: StepObserver | None = None,
    ):
        self.stages = tuple(stages)
        self.on_step_complete = on_step_complete

    @property
    def stage_names(self) -> list[str]:
        return [stage.name for stage in self.stages]

    def execute(
        self,
        context: RequestContext,
        on_step_complete: StepObserver | None = None,
    ) -> OrchestrationResult:
        """파이프라인 실행

        Args:
            context: 요청 컨텍스트
            on_step_complete: 이번 실행에만 사용할 관찰자 (없으면 생성 시 값)
        """
        return execute_pipeline(
            context,
            self.stages,
            on_step_complete=on_step_complete or self.on_step_complete,
        )


def create_pipeline(
    *stages: Stage | tuple[str, StageHandler],
    on_step_complete: StepObserver | None = None,
) -> Orchestrator:
    """(이름, 핸들러) 튜플 또는 Stage로 Orchestrator 생성"""
    normalized = [s if isinstance(s, Stage) else Stage(name=s[0], handler=s[1]) for s in stages]
    return Orchestrator(normalized, on_step_complete=on_step_complete)
