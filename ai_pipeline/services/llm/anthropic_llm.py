"""Anthropic API LLM 구현"""

import anthropic
from anthropic import Anthropic

from ai_pipeline.errors import LLMServiceError

from .base import BaseLLMService, LLMResponse, LLMStream, Message, drop_none

DEFAULT_MAX_TOKENS = 4096


class AnthropicLLM(BaseLLMService):
    """Anthropic API를 사용한 LLM 서비스"""

    provider = "anthropic"

    def __init__(self, model: str, api_key: str | None = None, timeout: float | None = None):
        """Anthropic 클라이언트 초기화

        Args:
            model: 모델명
            api_key: Anthropic API 키 (None이면 ANTHROPIC_API_KEY 환경변수 사용)
            timeout: 요청 타임아웃 (초)
        """
        self.model = model
        self.client = Anthropic(**drop_none({"api_key": api_key, "timeout": timeout}))

    def _build_params(self, messages: list[Message], kwargs: dict) -> dict:
        # system 메시지 분리
        system_parts = []
        conversation_messages = []

        for msg in messages:
            if msg.role == "system":
                system_parts.append(msg.content)
            else:
                conversation_messages.append({"role": msg.role, "content": msg.content})

        params = {
            "model": kwargs.pop("model", None) or self.model,
            "max_tokens": kwargs.pop("max_tokens", None) or DEFAULT_MAX_TOKENS,
            "messages": conversation_messages,
        }
        if system_parts:
            params["system"] = "\n\n".join(system_parts)
        params.update(drop_none(kwargs))
        return params

    def generate(self, messages: list[Message], **kwargs) -> LLMResponse:
        """메시지를 기반으로 응답 생성

        Args:
            messages: 대화 메시지 리스트
            **kwargs: 추가 파라미터 (temperature, max_tokens 등)

        Returns:
            LLMResponse 객체
        """
        params = self._build_params(messages, kwargs)

        try:
            response = self.client.messages.create(**params)
        except anthropic.APIError as e:
            raise self._wrap_error(e) from e

        text = "".join(block.text for block in response.content if block.type == "text")
        return LLMResponse(
            content=text,
            model=response.model,
            usage=self._usage(response.usage),
            metadata={"provider": self.provider, "stop_reason": response.stop_reason},
        )

    def stream_generate(self, messages: list[Message], **kwargs) -> LLMStream:
        """메시지를 기반으로 응답 생성 (스트리밍)

        Args:
            messages: 대화 메시지 리스트
            **kwargs: 추가 파라미터

        Returns:
            LLMStream
        """
        params = self._build_params(messages, kwargs)

        def _source():
            try:
                with self.client.messages.stream(**params) as stream:
                    for text in stream.text_stream:
                        yield text
                    final = stream.get_final_message()
            except anthropic.APIError as e:
                raise self._wrap_error(e) from e

            return LLMResponse(
                content="",
                model=final.model,
                usage=self._usage(final.usage),
                metadata={
                    "provider": self.provider,
                    "stop_reason": final.stop_reason,
                    "streamed": True,
                },
            )

        return LLMStream(_source())

    @staticmethod
    def _usage(usage) -> dict:
        # OpenAI와 동일한 키로 정규화
        return {
            "prompt_tokens": usage.input_tokens,
            "completion_tokens": usage.output_tokens,
            "total_tokens": usage.input_tokens + usage.output_tokens,
        }

    def _wrap_error(self, error: "anthropic.APIError") -> LLMServiceError:
        return LLMServiceError(
            f"anthropic 호출 실패: {error}",
            provider=self.provider,
            timeout=isinstance(error, anthropic.APITimeoutError),
            status_code=getattr(error, "status_code", None),
        )
