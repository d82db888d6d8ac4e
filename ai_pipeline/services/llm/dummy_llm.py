"""더미 LLM 구현 (테스트/오프라인 데모용)"""

from .base import BaseLLMService, LLMResponse, LLMStream, Message


class DummyLLM(BaseLLMService):
    """테스트용 더미 LLM 서비스

    replies를 지정하면 순서대로 돌려주고(마지막 값 반복), 지정하지 않으면
    마지막 사용자 메시지를 인용하는 고정 응답을 만듭니다.
    """

    provider = "dummy"

    def __init__(
        self,
        replies: list[str] | None = None,
        model: str = "dummy-model",
        chunk_size: int = 8,
    ):
        self.replies = list(replies or [])
        self.model = model
        self.chunk_size = max(1, chunk_size)
        self.calls: list[dict] = []

    def _next_reply(self, messages: list[Message]) -> str:
        if self.replies:
            return self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]

        # 마지막 사용자 메시지 추출
        user_message = ""
        for msg in reversed(messages):
            if msg.role == "user":
                user_message = msg.content
                break
        return f"[dummy] {user_message[:100]}"

    def generate(self, messages: list[Message], **kwargs) -> LLMResponse:
        """더미 응답 생성

        Args:
            messages: 대화 메시지 리스트
            **kwargs: 추가 파라미터 (기록만 하고 무시)

        Returns:
            LLMResponse 객체
        """
        self.calls.append({"messages": list(messages), "kwargs": dict(kwargs)})
        text = self._next_reply(messages)

        prompt_tokens = sum(len(m.content) for m in messages) // 4
        completion_tokens = len(text) // 4
        return LLMResponse(
            content=text,
            model=self.model,
            usage={
                "prompt_tokens": prompt_tokens,
                "completion_tokens": completion_tokens,
                "total_tokens": prompt_tokens + completion_tokens,
            },
            metadata={"provider": self.provider},
        )

    def stream_generate(self, messages: list[Message], **kwargs) -> LLMStream:
        def _source():
            response = self.generate(messages, **kwargs)
            text = response.content
            for start in range(0, len(text), self.chunk_size):
                yield text[start:start + self.chunk_size]
            response.metadata["streamed"] = True
            return response

        return LLMStream(_source())
