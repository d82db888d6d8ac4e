"""대화형 AI 요청 파이프라인

스테이지 순차 실행 엔진, 하이브리드 의도 분류기, 컨텍스트 최적화기를 제공합니다.
"""

from ai_pipeline.errors import (
    ClassificationFailure,
    ConfigurationError,
    GenerationFailure,
    LLMServiceError,
    ModerationRejection,
    PipelineException,
    RateLimitExceeded,
    ValidationError,
)
from ai_pipeline.services.context import (
    ContextMode,
    ContextOptimizer,
    ContextResult,
    ContextSection,
    ContextStrategy,
)
from ai_pipeline.services.intent import (
    ClassificationMethod,
    HybridIntentResolver,
    IntentConfig,
    IntentPattern,
    IntentResult,
    KeywordIntentClassifier,
    LLMIntentClassifier,
    resolve_intent,
)
from ai_pipeline.services.orchestration import (
    GenerationResult,
    OrchestrationResult,
    Orchestrator,
    PipelineRequest,
    RequestContext,
    Stage,
    StepError,
    create_pipeline,
    execute_pipeline,
)

__version__ = "0.1.0"

__all__ = [
    "ClassificationFailure",
    "ConfigurationError",
    "GenerationFailure",
    "LLMServiceError",
    "ModerationRejection",
    "PipelineException",
    "RateLimitExceeded",
    "ValidationError",
    "ContextMode",
    "ContextOptimizer",
    "ContextResult",
    "ContextSection",
    "ContextStrategy",
    "ClassificationMethod",
    "HybridIntentResolver",
    "IntentConfig",
    "IntentPattern",
    "IntentResult",
    "KeywordIntentClassifier",
    "LLMIntentClassifier",
    "resolve_intent",
    "GenerationResult",
    "OrchestrationResult",
    "Orchestrator",
    "PipelineRequest",
    "RequestContext",
    "Stage",
    "StepError",
    "create_pipeline",
    "execute_pipeline",
]
