"""LLM 서비스 기본 인터페이스"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Generator, Iterator


@dataclass
class Message:
    """채팅 메시지"""

    role: str  # "system" | "user" | "assistant"
    content: str


@dataclass
class LLMResponse:
    """LLM 응답 데이터 클래스"""

    content: str
    model: str | None = None
    usage: dict = field(default_factory=dict)
    metadata: dict = field(default_factory=dict)


class LLMStream:
    """스트리밍 응답

    텍스트 조각(델타)을 한 번만 순회할 수 있는 이터레이터입니다.
    순회가 끝나면 `response`에 전체 텍스트와 usage가 담긴 LLMResponse가 채워집니다.

    source 제너레이터는 델타를 yield 하고, 종료 시 LLMResponse를 return 할 수 있습니다.
    (return 값이 없으면 모은 텍스트로 LLMResponse를 만듭니다)
    """

    def __init__(self, source: Iterator[str] | Generator[str, None, LLMResponse | None]):
        self._source = source
        self._started = False
        self.response: LLMResponse | None = None

    def __iter__(self) -> Iterator[str]:
        if self._started:
            raise RuntimeError("LLMStream은 한 번만 순회할 수 있습니다")
        self._started = True
        return self._iterate()

    def _iterate(self) -> Iterator[str]:
        parts: list[str] = []
        final: LLMResponse | None = None
        source = iter(self._source)

        while True:
            try:
                chunk = next(source)
            except StopIteration as stop:
                final = stop.value
                break
            if not chunk:
                continue
            parts.append(chunk)
            yield chunk

        text = "".join(parts)
        if final is None:
            final = LLMResponse(content=text)
        elif not final.content:
            final.content = text
        self.response = final

    def close(self) -> None:
        """스트림 중단

        source 제너레이터를 닫아 백엔드 스트림(HTTP 연결)을 정리합니다.
        이미 끝난 스트림에는 아무 일도 하지 않습니다.
        """
        close = getattr(self._source, "close", None)
        if close is not None:
            close()

    @property
    def done(self) -> bool:
        return self.response is not None

    def collect(self) -> LLMResponse:
        """남은 델타를 모두 소비하고 최종 응답 반환"""
        if not self._started:
            for _ in self:
                pass
        if self.response is None:
            raise RuntimeError("스트림이 아직 끝나지 않았습니다")
        return self.response


class BaseLLMService(ABC):
    """LLM 서비스 기본 추상 클래스"""

    provider: str = "base"
    model: str | None = None

    @abstractmethod
    def generate(self, messages: list[Message], **kwargs) -> LLMResponse:
        """메시지를 기반으로 응답 생성 (동기, 논-스트리밍)

        Args:
            messages: 대화 메시지 리스트
            **kwargs: 추가 파라미터 (temperature, max_tokens 등)

        Returns:
            LLMResponse 객체

        Raises:
            LLMServiceError: 네트워크/인증/타임아웃 실패
        """

    def stream_generate(self, messages: list[Message], **kwargs) -> LLMStream:
        """메시지를 기반으로 응답 생성 (스트리밍)

        Args:
            messages: 대화 메시지 리스트
            **kwargs: 추가 파라미터

        Returns:
            LLMStream (델타 이터레이터 + 최종 응답)
        """

        # 기본 구현: 스트리밍 미지원 시 전체 응답을 한 번에 yield
        def _source():
            response = self.generate(messages, **kwargs)
            yield response.content
            return response

        return LLMStream(_source())

    def chat(self, user_message: str, system_message: str | None = None, **kwargs) -> str:
        """간단한 채팅 인터페이스

        Args:
            user_message: 사용자 메시지
            system_message: 시스템 메시지 (선택)
            **kwargs: 추가 파라미터

        Returns:
            응답 텍스트
        """
        messages = []
        if system_message:
            messages.append(Message(role="system", content=system_message))
        messages.append(Message(role="user", content=user_message))

        response = self.generate(messages, **kwargs)
        return response.content


def drop_none(params: dict) -> dict:
    """값이 None인 파라미터 제거 (SDK에 null이 전달되지 않도록)"""
    return {key: value for key, value in params.items() if value is not None}
