"""모더레이션 스테이지

스팸 문구와 사용자 정의 정규식 규칙으로 사용자 메시지를 검사합니다.
차단 시 예외를 던지지 않고 context.error를 설정합니다.
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Pattern

from ai_pipeline.errors import ModerationRejection
from ai_pipeline.services.orchestration.models import RequestContext, StageHandler, StepError

logger = logging.getLogger(__name__)

SPAM_REASON = "Message flagged as spam"


@dataclass(frozen=True)
class ModerationRule:
    """정규식 패턴 + 차단 사유"""

    pattern: Pattern[str]
    reason: str

    def __post_init__(self):
        # 문자열 패턴은 대소문자 무시로 컴파일
        if isinstance(self.pattern, str):
            object.__setattr__(self, "pattern", re.compile(self.pattern, re.IGNORECASE))


def check_content(
    text: str,
    spam_patterns: tuple[str, ...],
    custom_rules: tuple[ModerationRule, ...],
) -> str | None:
    """차단 사유 반환 (통과 시 None)"""
    lowered = text.lower()
    for phrase in spam_patterns:
        if phrase in lowered:
            return SPAM_REASON
    for rule in custom_rules:
        if rule.pattern.search(text):
            return rule.reason
    return None


def create_moderation_handler(
    spam_patterns: Iterable[str] = (),
    custom_rules: Iterable[ModerationRule] = (),
    step_name: str = "moderation",
) -> StageHandler:
    """모더레이션 핸들러 생성

    Args:
        spam_patterns: 차단할 문구 (대소문자 무시 부분 일치)
        custom_rules: ModerationRule 목록
        step_name: 오류에 기록할 스테이지 이름

    Returns:
        스테이지 핸들러
    """
    spam = tuple(p.lower() for p in spam_patterns if p)
    rules = tuple(custom_rules)

    def handler(context: RequestContext) -> RequestContext:
        for message in context.request.user_messages():
            reason = check_content(message.content, spam, rules)
            if reason is None:
                continue

            logger.info("모더레이션 차단: %s", reason)
            rejection = ModerationRejection(f"Content blocked: {reason}", reason=reason)
            context.error = StepError(
                rejection.message,
                step=step_name,
                status_code=rejection.status_code,
                cause=rejection,
            )
            break
        return context

    return handler
