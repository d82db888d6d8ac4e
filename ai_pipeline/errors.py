"""파이프라인 예외 계층

스테이지 핸들러가 raise 하거나 RequestContext.error 의 cause 로 보관되는 예외들입니다.
status_code 는 호출 측(HTTP 레이어 등)이 응답 코드로 매핑할 때 참고하는 값입니다.
"""


class PipelineException(Exception):
    """파이프라인 예외 기본 클래스"""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(PipelineException):
    """필수 입력이 잘못된 경우 (예: 사용자 메시지 없음)"""

    status_code = 400


class ModerationRejection(PipelineException):
    """모더레이션에 의해 차단된 콘텐츠"""

    status_code = 400

    def __init__(self, message: str, reason: str | None = None):
        super().__init__(message)
        self.reason = reason or message


class RateLimitExceeded(PipelineException):
    """요청 한도 초과"""

    status_code = 429

    def __init__(self, message: str, retry_after: int | None = None):
        super().__init__(message)
        self.retry_after = retry_after


class ClassificationFailure(PipelineException):
    """모델 기반 의도 분류의 전송/파싱 실패"""

    status_code = 502


class GenerationFailure(PipelineException):
    """응답 생성 백엔드의 전송/파싱 실패"""

    status_code = 502

    def __init__(self, message: str, timeout: bool = False):
        super().__init__(message, status_code=504 if timeout else None)
        self.timeout = timeout


class ConfigurationError(PipelineException):
    """패턴/섹션/프로바이더 설정 오류 (생성 시점에 즉시 발생)"""

    status_code = 500


class LLMServiceError(Exception):
    """LLM 백엔드 호출 실패 (네트워크, 인증, 타임아웃)

    벤더 SDK 예외를 감싸서 상위 컴포넌트가 프로바이더와 무관하게 처리할 수 있도록 합니다.
    """

    def __init__(
        self,
        message: str,
        provider: str,
        timeout: bool = False,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.provider = provider
        self.timeout = timeout
        self.status_code = status_code
