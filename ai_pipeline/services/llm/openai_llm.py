"""OpenAI 호환 API LLM 구현

OpenAI 외에 OpenAI 호환 엔드포인트(DeepSeek, Ollama)도 base_url로 지원합니다.
"""

import openai
from openai import OpenAI

from ai_pipeline.errors import LLMServiceError

from .base import BaseLLMService, LLMResponse, LLMStream, Message, drop_none


class OpenAILLM(BaseLLMService):
    """OpenAI Chat Completions API를 사용한 LLM 서비스"""

    def __init__(
        self,
        model: str,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        provider: str = "openai",
    ):
        """OpenAI 클라이언트 초기화

        Args:
            model: 모델명
            api_key: API 키 (None이면 OPENAI_API_KEY 환경변수 사용)
            base_url: 호환 엔드포인트 주소 (DeepSeek, Ollama 등)
            timeout: 요청 타임아웃 (초)
            provider: 프로바이더 이름 (에러/메타데이터 표기용)
        """
        self.model = model
        self.provider = provider
        self.client = OpenAI(
            **drop_none({"api_key": api_key, "base_url": base_url, "timeout": timeout})
        )

    def generate(self, messages: list[Message], **kwargs) -> LLMResponse:
        """메시지를 기반으로 응답 생성 (동기, 논-스트리밍)

        Args:
            messages: 대화 메시지 리스트
            **kwargs: 추가 파라미터 (temperature, max_tokens 등)

        Returns:
            LLMResponse 객체
        """
        # Message 객체를 OpenAI 형식으로 변환
        openai_messages = [{"role": msg.role, "content": msg.content} for msg in messages]

        try:
            response = self.client.chat.completions.create(
                model=kwargs.pop("model", None) or self.model,
                messages=openai_messages,
                **drop_none(kwargs),
            )
        except openai.APIError as e:
            raise self._wrap_error(e) from e

        if not response.choices:
            raise LLMServiceError(
                f"{self.provider} 응답에 choices가 없습니다", provider=self.provider
            )

        return LLMResponse(
            content=response.choices[0].message.content or "",
            model=response.model,
            usage=self._usage(response.usage),
            metadata={
                "provider": self.provider,
                "finish_reason": response.choices[0].finish_reason,
            },
        )

    def stream_generate(self, messages: list[Message], **kwargs) -> LLMStream:
        """메시지를 기반으로 응답 생성 (스트리밍)

        마지막 청크의 usage를 받기 위해 stream_options.include_usage를 사용합니다.

        Args:
            messages: 대화 메시지 리스트
            **kwargs: 추가 파라미터

        Returns:
            LLMStream
        """
        openai_messages = [{"role": msg.role, "content": msg.content} for msg in messages]
        model = kwargs.pop("model", None) or self.model

        def _source():
            usage: dict = {}
            response_model = model
            try:
                stream = self.client.chat.completions.create(
                    model=model,
                    messages=openai_messages,
                    stream=True,
                    stream_options={"include_usage": True},
                    **drop_none(kwargs),
                )
                # 중간에 닫혀도 HTTP 응답 해제
                with stream:
                    for chunk in stream:
                        response_model = chunk.model or response_model
                        if chunk.usage is not None:
                            usage = self._usage(chunk.usage)
                        if chunk.choices and chunk.choices[0].delta.content:
                            yield chunk.choices[0].delta.content
            except openai.APIError as e:
                raise self._wrap_error(e) from e

            return LLMResponse(
                content="",
                model=response_model,
                usage=usage,
                metadata={"provider": self.provider, "streamed": True},
            )

        return LLMStream(_source())

    @staticmethod
    def _usage(usage) -> dict:
        if usage is None:
            return {}
        return {
            "prompt_tokens": usage.prompt_tokens,
            "completion_tokens": usage.completion_tokens,
            "total_tokens": usage.total_tokens,
        }

    def _wrap_error(self, error: "openai.APIError") -> LLMServiceError:
        return LLMServiceError(
            f"{self.provider} 호출 실패: {error}",
            provider=self.provider,
            timeout=isinstance(error, openai.APITimeoutError),
            status_code=getattr(error, "status_code", None),
        )
