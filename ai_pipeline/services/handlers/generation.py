"""응답 생성 스테이지 (논-스트리밍 / 스트리밍)

기본 시스템 프롬프트는 prompt_context.system_prompt에 의도 톤(tone)을 덧붙인 것입니다.
백엔드 호출 실패(LLMServiceError)는 GenerationFailure로 변환되어 파이프라인을 중단합니다.
"""

from typing import TYPE_CHECKING, Callable

from ai_pipeline.errors import GenerationFailure, LLMServiceError, ValidationError
from ai_pipeline.services.llm.base import LLMResponse, Message
from ai_pipeline.services.orchestration.models import (
    GenerationResult,
    RequestContext,
    StageHandler,
)

if TYPE_CHECKING:
    from ai_pipeline.services.llm.base import BaseLLMService

SystemPromptBuilder = Callable[[RequestContext], str]


def default_system_prompt(context: RequestContext) -> str:
    """컨텍스트 스테이지 결과 + 의도 톤"""
    system_prompt = context.prompt_context.system_prompt if context.prompt_context else ""
    tone = context.intent.tone if context.intent else None
    if tone:
        system_prompt += f"\n\nTone: {tone}"
    return system_prompt.strip()


def build_messages(context: RequestContext, system_prompt: str) -> list[Message]:
    """LLM 메시지 구성

    Raises:
        ValidationError: 사용자 메시지가 없는 경우
    """
    if context.request.last_user_message() is None:
        raise ValidationError("생성을 위한 사용자 메시지가 없습니다")

    messages = []
    if system_prompt:
        messages.append(Message(role="system", content=system_prompt))
    messages.extend(context.request.messages)
    return messages


def _to_result(response: LLMResponse) -> GenerationResult:
    return GenerationResult(
        text=response.content,
        usage=dict(response.usage or {}),
        model=response.model,
        metadata=dict(response.metadata or {}),
    )


def create_generation_handler(
    llm_service: "BaseLLMService",
    get_system_prompt: SystemPromptBuilder | None = None,
    temperature: float | None = None,
    max_tokens: int | None = None,
) -> StageHandler:
    """논-스트리밍 생성 핸들러 생성"""
    get_system_prompt = get_system_prompt or default_system_prompt

    def handler(context: RequestContext) -> RequestContext:
        messages = build_messages(context, get_system_prompt(context))
        try:
            response = llm_service.generate(
                messages, temperature=temperature, max_tokens=max_tokens
            )
        except LLMServiceError as e:
            raise GenerationFailure(f"응답 생성 실패: {e.message}", timeout=e.timeout) from e

        context.generation = _to_result(response)
        return context

    return handler


def create_streaming_generation_handler(
    llm_service: "BaseLLMService",
    on_chunk: Callable[[str], None],
    get_system_prompt: SystemPromptBuilder | None = None,
    temperature: float | None = None,
    max_tokens: int | None = None,
) -> StageHandler:
    """스트리밍 생성 핸들러 생성

    on_chunk는 스테이지가 끝나기 전에만 (0회 이상) 호출되고,
    스트림이 끝나면 전체 텍스트와 usage가 context.generation에 기록됩니다.
    """
    get_system_prompt = get_system_prompt or default_system_prompt

    def handler(context: RequestContext) -> RequestContext:
        messages = build_messages(context, get_system_prompt(context))
        stream = llm_service.stream_generate(
            messages, temperature=temperature, max_tokens=max_tokens
        )
        try:
            for chunk in stream:
                on_chunk(chunk)
        except LLMServiceError as e:
            raise GenerationFailure(f"스트리밍 생성 실패: {e.message}", timeout=e.timeout) from e
        finally:
            stream.close()

        context.generation = _to_result(stream.collect())
        return context

    return handler
