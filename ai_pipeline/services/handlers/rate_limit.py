"""요청 한도 스테이지

한도 정책은 RateLimiter 구현체가 결정합니다. InMemoryRateLimiter는 단일 프로세스용 고정 윈도우
카운터이며, 여러 인스턴스로 운영할 때는 공유 저장소 기반 구현체로 교체해야 합니다.
"""

import logging
import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Protocol, runtime_checkable

from ai_pipeline.errors import RateLimitExceeded
from ai_pipeline.services.orchestration.models import RequestContext, StageHandler, StepError

logger = logging.getLogger(__name__)

ANONYMOUS = "anonymous"


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    retry_after: int | None = None  # 초


@runtime_checkable
class RateLimiter(Protocol):
    """식별자별 요청 허용 여부 판단 (같은 식별자에 대한 동시 호출에 안전해야 함)"""

    def check(self, identifier: str) -> RateLimitDecision: ...


class InMemoryRateLimiter:
    """고정 윈도우 인메모리 카운터"""

    def __init__(
        self,
        limit: int = 5,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.Lock()
        # identifier -> (count, reset_at)
        self._windows: dict[str, tuple[int, float]] = {}

    def check(self, identifier: str) -> RateLimitDecision:
        now = self._clock()
        with self._lock:
            count, reset_at = self._windows.get(identifier, (0, 0.0))
            if now >= reset_at:
                self._windows[identifier] = (1, now + self.window_seconds)
                return RateLimitDecision(allowed=True)

            if count >= self.limit:
                return RateLimitDecision(
                    allowed=False, retry_after=max(1, math.ceil(reset_at - now))
                )

            self._windows[identifier] = (count + 1, reset_at)
            return RateLimitDecision(allowed=True)


def create_rate_limit_handler(
    limiter: RateLimiter,
    identifier_key: str = "userId",
    step_name: str = "rate-limit",
) -> StageHandler:
    """요청 한도 핸들러 생성

    Args:
        limiter: RateLimiter 구현체
        identifier_key: request.metadata에서 식별자를 꺼낼 키
        step_name: 오류에 기록할 스테이지 이름

    Returns:
        스테이지 핸들러
    """

    def handler(context: RequestContext) -> RequestContext:
        identifier = str(context.request.metadata.get(identifier_key) or ANONYMOUS)
        decision = limiter.check(identifier)
        if decision.allowed:
            return context

        logger.info("요청 한도 초과: %s (retry_after=%s)", identifier, decision.retry_after)
        message = "Rate limit exceeded"
        if decision.retry_after is not None:
            message += f". Retry after {decision.retry_after} seconds"
        exceeded = RateLimitExceeded(message, retry_after=decision.retry_after)
        context.error = StepError(
            message, step=step_name, status_code=exceeded.status_code, cause=exceeded
        )
        return context

    return handler
