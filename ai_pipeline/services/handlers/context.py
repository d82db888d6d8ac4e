"""프롬프트 컨텍스트 스테이지

의도 스테이지 이후에 실행되어야 합니다. 기본 토픽은 분류된 의도 카테고리입니다.
"""

from typing import Callable

from ai_pipeline.services.context.optimizer import ContextOptimizer
from ai_pipeline.services.orchestration.models import RequestContext, StageHandler


def default_topics(context: RequestContext) -> list[str]:
    intent = context.intent
    if intent is None or intent.is_unknown:
        return []
    return [intent.intent]


def is_first_message(context: RequestContext) -> bool:
    return len(context.request.user_messages()) <= 1


def create_context_handler(
    optimizer: ContextOptimizer,
    get_topics: Callable[[RequestContext], list[str]] | None = None,
    first_message: Callable[[RequestContext], bool] | None = None,
) -> StageHandler:
    """컨텍스트 핸들러 생성

    Args:
        optimizer: ContextOptimizer
        get_topics: 컨텍스트에서 토픽을 뽑는 함수 (기본: 의도 카테고리)
        first_message: 첫 메시지 판정 함수 (기본: 사용자 메시지가 하나뿐인지)
    """
    get_topics = get_topics or default_topics
    first_message = first_message or is_first_message

    def handler(context: RequestContext) -> RequestContext:
        context.prompt_context = optimizer.build(get_topics(context), first_message(context))
        return context

    return handler
