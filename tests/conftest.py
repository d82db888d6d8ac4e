"""테스트 픽스처 및 설정"""

import pytest

from ai_pipeline.services.context import ContextOptimizer, ContextSection, ContextStrategy
from ai_pipeline.services.intent import IntentConfig, IntentPattern, KeywordIntentClassifier
from ai_pipeline.services.llm.base import Message
from ai_pipeline.services.llm.dummy_llm import DummyLLM
from ai_pipeline.services.orchestration import RequestContext


@pytest.fixture
def dummy_llm_service():
    """더미 LLM 서비스 픽스처"""
    return DummyLLM()


@pytest.fixture
def intent_config():
    """샘플 의도 설정"""
    return IntentConfig(
        patterns=(
            IntentPattern("greeting", ("hello", "hi", "hey")),
            IntentPattern("help", ("help", "support", "assist")),
            IntentPattern("pricing", ("price", "cost", "pricing", "payment")),
            IntentPattern("technical", ("bug", "error", "not working", "broken")),
        ),
        tones={
            "greeting": "Be warm and welcoming",
            "help": "Be helpful and patient",
        },
        deep_links={"pricing": "/pricing"},
        requires_auth={"technical"},
    )


@pytest.fixture
def keyword_classifier(intent_config):
    return KeywordIntentClassifier(intent_config)


@pytest.fixture
def sample_sections():
    """샘플 컨텍스트 섹션"""
    return [
        ContextSection(
            id="core",
            name="Core Instructions",
            content="You are a helpful customer support assistant.",
            always_include=True,
        ),
        ContextSection(
            id="pricing-info",
            name="Pricing Information",
            content="Plans: Free ($0/mo), Pro ($29/mo), Enterprise (custom pricing).",
            topics=("pricing",),
        ),
        ContextSection(
            id="technical-guide",
            name="Technical Support Guide",
            content="Common issues: check logs, restart service, contact support.",
            topics=("technical",),
        ),
        ContextSection(
            id="misc",
            name="Misc",
            content="Untagged notes.",
        ),
    ]


@pytest.fixture
def context_optimizer(sample_sections):
    return ContextOptimizer(sample_sections, ContextStrategy("full", "selective"))


@pytest.fixture
def make_context():
    """사용자 메시지로 RequestContext 생성"""

    def _make(*texts: str, **metadata) -> RequestContext:
        return RequestContext.from_messages(
            [Message(role="user", content=t) for t in texts], **metadata
        )

    return _make
