"""의도 분류 스테이지"""

from ai_pipeline.errors import ValidationError
from ai_pipeline.services.intent.resolver import HybridIntentResolver
from ai_pipeline.services.orchestration.models import RequestContext, StageHandler


def create_intent_handler(resolver: HybridIntentResolver) -> StageHandler:
    """마지막 사용자 메시지의 의도를 context.intent에 기록하는 핸들러"""

    def handler(context: RequestContext) -> RequestContext:
        message = context.request.last_user_message()
        if message is None or not message.content.strip():
            raise ValidationError("의도 분류를 위한 사용자 메시지가 없습니다")

        context.intent = resolver.resolve(message.content)
        return context

    return handler
