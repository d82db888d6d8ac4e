"""대화형 채팅 CLI

설정(.env)에 지정된 프로바이더로 모더레이션 → 의도 → 컨텍스트 → 스트리밍 생성 파이프라인을 실행합니다.

    AI_PROVIDER=anthropic AI_MODEL=claude-3-5-haiku-20241022 ANTHROPIC_API_KEY=... ai-pipeline
    ai-pipeline --once "hello, I need help"
"""

import argparse
import sys

from ai_pipeline.services.context import ContextOptimizer, ContextSection, ContextStrategy
from ai_pipeline.services.handlers import (
    ModerationRule,
    create_context_handler,
    create_intent_handler,
    create_moderation_handler,
    create_streaming_generation_handler,
)
from ai_pipeline.services.intent import (
    HybridIntentResolver,
    IntentConfig,
    IntentPattern,
    KeywordIntentClassifier,
    LLMIntentClassifier,
)
from ai_pipeline.errors import ConfigurationError
from ai_pipeline.services.llm import BaseLLMService, Message, ProviderConfig, get_llm_service
from ai_pipeline.services.orchestration import Orchestrator, RequestContext, Stage
from ai_pipeline.settings import (
    Settings,
    get_settings,
    provider_config_from_settings,
    validate_settings,
)
from ai_pipeline.utils.logger import setup_logging

EXIT_COMMANDS = {"exit", "quit"}

DEMO_INTENTS = IntentConfig(
    patterns=(
        IntentPattern("greeting", ("hello", "hi", "hey", "greetings")),
        IntentPattern("help", ("help", "support", "assist")),
        IntentPattern("goodbye", ("bye", "goodbye")),
    ),
    tones={
        "greeting": "Be warm and welcoming",
        "help": "Be helpful and patient",
        "goodbye": "Be friendly and wish them well",
    },
)

DEMO_CATEGORY_DESCRIPTIONS = {
    "greeting": "User is greeting or saying hello",
    "help": "User needs help or has a question",
    "goodbye": "User is ending the conversation",
    "general": "General conversation or unclear intent",
}

DEMO_SECTIONS = (
    ContextSection(
        id="core",
        name="Core Instructions",
        content="You are a helpful AI assistant. Be concise, friendly, and conversational.",
        always_include=True,
    ),
    ContextSection(
        id="greeting",
        name="Greeting Guide",
        content="Welcome users warmly and ask how you can help.",
        topics=("greeting",),
    ),
    ContextSection(
        id="help",
        name="Help Guide",
        content="Provide clear, actionable help and guidance.",
        topics=("help",),
    ),
)


def build_demo_pipeline(
    llm_service: BaseLLMService,
    on_chunk,
    classifier_config: ProviderConfig | None = None,
    current: Settings | None = None,
) -> Orchestrator:
    """데모 파이프라인 구성

    Args:
        llm_service: 응답 생성 백엔드
        on_chunk: 스트리밍 델타 콜백
        classifier_config: LLM 의도 분류기 백엔드 설정 (None이면 키워드 분류만 사용)
        current: 설정 (None이면 환경 변수에서 로드)
    """
    current = current or get_settings()
    llm_classifier = None
    if classifier_config is not None:
        llm_classifier = LLMIntentClassifier.from_provider(
            classifier_config,
            categories=list(DEMO_CATEGORY_DESCRIPTIONS),
            category_descriptions=DEMO_CATEGORY_DESCRIPTIONS,
        )
    resolver = HybridIntentResolver(
        KeywordIntentClassifier(DEMO_INTENTS),
        llm_classifier,
        current.intent_confidence_threshold,
    )
    optimizer = ContextOptimizer(DEMO_SECTIONS, ContextStrategy("full", "selective"))

    return Orchestrator(
        [
            Stage(
                "moderation",
                create_moderation_handler(
                    spam_patterns=("buy now", "click here"),
                    custom_rules=(ModerationRule(r"\b(spam|scam)\b", "Potential spam content"),),
                ),
            ),
            Stage("intent", create_intent_handler(resolver)),
            Stage("context", create_context_handler(optimizer)),
            Stage(
                "generation",
                create_streaming_generation_handler(
                    llm_service,
                    on_chunk=on_chunk,
                    temperature=current.temperature,
                    max_tokens=current.max_tokens,
                ),
            ),
        ]
    )


def run_turn(pipeline: Orchestrator, history: list[Message], text: str, verbose: bool) -> bool:
    """한 턴 실행. 성공 시 history에 사용자/어시스턴트 메시지를 추가"""
    history.append(Message(role="user", content=text))
    context = RequestContext.from_messages(history, userId="cli")

    def on_step_complete(step: str, duration_ms: float) -> None:
        if verbose:
            print(f"\n  ✓ {step} ({duration_ms:.0f}ms)", file=sys.stderr)

    print("AI: ", end="", flush=True)
    result = pipeline.execute(context, on_step_complete=on_step_complete)
    print()

    if not result.success:
        history.pop()
        print(f"[error] {result.error.step}: {result.error.message}", file=sys.stderr)
        return False

    history.append(Message(role="assistant", content=result.context.generation.text))
    if verbose:
        intent = result.context.intent
        prompt_context = result.context.prompt_context
        print(
            f"  intent={intent.intent} ({intent.confidence:.2f}, {intent.method.value})"
            f" sections={list(prompt_context.sections_included)}"
            f" usage={result.context.generation.usage}",
            file=sys.stderr,
        )
    return True


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="ai-pipeline", description="Interactive chat pipeline")
    parser.add_argument("--once", metavar="TEXT", help="한 번만 실행하고 종료")
    parser.add_argument("--llm-fallback", action="store_true", help="LLM 의도 분류 폴백 사용")
    parser.add_argument("-v", "--verbose", action="store_true", help="스텝 시간/의도 출력")
    args = parser.parse_args(argv)

    try:
        current = get_settings()
    except ConfigurationError as e:
        print(f"❌ {e.message}", file=sys.stderr)
        return 1
    setup_logging(current.log_level)

    warnings = validate_settings(current)
    if warnings:
        for message in warnings.values():
            print(f"❌ {message}", file=sys.stderr)
        return 1

    llm_service = get_llm_service(current)
    # 의도 분류기는 생성과 같은 프로바이더를 쓰되 별도 클라이언트로 구성
    classifier_config = provider_config_from_settings(current) if args.llm_fallback else None
    pipeline = build_demo_pipeline(
        llm_service,
        on_chunk=lambda chunk: print(chunk, end="", flush=True),
        classifier_config=classifier_config,
        current=current,
    )
    history: list[Message] = []

    if args.once:
        return 0 if run_turn(pipeline, history, args.once, args.verbose) else 1

    print(f"Provider: {llm_service.provider} | Model: {llm_service.model}")
    print('Type "exit" or "quit" to end the conversation\n')
    while True:
        try:
            text = input("You: ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            break
        if not text:
            continue
        if text.lower() in EXIT_COMMANDS:
            print("👋 Goodbye!")
            break
        run_turn(pipeline, history, text, args.verbose)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
