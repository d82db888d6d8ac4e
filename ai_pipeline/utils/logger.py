"""로깅 설정

라이브러리 모듈은 `logging.getLogger(__name__)`만 사용하고,
핸들러와 레벨은 실행 진입점(CLI)에서 한 번만 붙입니다.
"""

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_ROOT_NAME = "ai_pipeline"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """패키지 로거에 콘솔 핸들러 연결

    Args:
        level: 로그 레벨 이름 (DEBUG, INFO 등)

    Returns:
        패키지 루트 로거
    """
    root = logging.getLogger(_ROOT_NAME)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    if not root.handlers:
        _ch = logging.StreamHandler()
        _ch.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(_ch)
    return root
