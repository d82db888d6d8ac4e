"""의도 분류 테스트 (키워드 / LLM / 하이브리드)"""

from types import SimpleNamespace

import pytest
from unittest.mock import Mock

from ai_pipeline.errors import ClassificationFailure, ConfigurationError, LLMServiceError
from ai_pipeline.services.intent import (
    UNKNOWN_INTENT,
    ClassificationMethod,
    HybridIntentResolver,
    IntentConfig,
    IntentPattern,
    IntentResult,
    KeywordIntentClassifier,
    LLMIntentClassifier,
    resolve_intent,
)
from ai_pipeline.services.llm.base import LLMResponse
from ai_pipeline.services.llm.dummy_llm import DummyLLM
from ai_pipeline.services.llm.factory import ProviderConfig
from ai_pipeline.services.llm.openai_llm import OpenAILLM


class TestIntentModels:
    """데이터 모델 테스트"""

    def test_confidence_is_clamped(self):
        assert IntentResult("x", confidence=1.7).confidence == 1.0
        assert IntentResult("x", confidence=-0.2).confidence == 0.0

    def test_pattern_keywords_become_tuple(self):
        pattern = IntentPattern("help", ["help"])
        assert pattern.keywords == ("help",)

    def test_empty_keywords_rejected(self):
        with pytest.raises(ConfigurationError):
            IntentPattern("help", [])

    def test_blank_keyword_rejected(self):
        with pytest.raises(ConfigurationError):
            IntentPattern("help", ["help", "  "])

    def test_no_patterns_rejected(self):
        with pytest.raises(ConfigurationError):
            IntentConfig(patterns=())

    def test_duplicate_category_rejected(self):
        with pytest.raises(ConfigurationError):
            IntentConfig(patterns=(IntentPattern("a", ["x"]), IntentPattern("a", ["y"])))

    def test_config_is_read_only(self, intent_config):
        with pytest.raises(TypeError):
            intent_config.tones["greeting"] = "changed"


class TestKeywordIntentClassifier:
    """KeywordIntentClassifier 테스트"""

    def test_tie_broken_by_declaration_order(self):
        """동점이면 먼저 선언된 카테고리"""
        classifier = KeywordIntentClassifier(
            [IntentPattern("greeting", ["hi", "hello"]), IntentPattern("help", ["help"])]
        )

        result = classifier.classify("hello, I need help")

        assert result.intent == "greeting"
        assert result.confidence == 0.5
        assert result.matched_keywords == ["hello"]
        assert result.method == ClassificationMethod.KEYWORD

    def test_highest_count_wins(self, keyword_classifier):
        result = keyword_classifier.classify("The price and cost of payment plans")

        assert result.intent == "pricing"
        assert result.confidence == pytest.approx(0.75)
        assert result.matched_keywords == ["price", "cost", "payment"]

    def test_case_insensitive(self, keyword_classifier):
        result = keyword_classifier.classify("HELP me, SUPPORT!")
        assert result.intent == "help"

    def test_no_match_returns_unknown(self, keyword_classifier):
        """매칭이 없으면 unknown"""
        result = keyword_classifier.classify("zzz qqq")

        assert result.intent == UNKNOWN_INTENT
        assert result.confidence == 0.0
        assert result.matched_keywords == []

    def test_empty_text_returns_unknown(self, keyword_classifier):
        assert keyword_classifier.classify("").intent == UNKNOWN_INTENT

    def test_metadata_for_winner(self, keyword_classifier):
        """tone / deep_link / requires_auth 메타데이터"""
        assert keyword_classifier.classify("hey there").metadata == {
            "tone": "Be warm and welcoming"
        }
        assert keyword_classifier.classify("pricing?").metadata == {"deep_link": "/pricing"}
        assert keyword_classifier.classify("found a bug").metadata == {"requires_auth": True}


class TestLLMIntentClassifier:
    """LLMIntentClassifier 테스트"""

    @pytest.fixture
    def mock_llm_service(self):
        """Mock LLM 서비스"""
        service = Mock()
        service.generate = Mock(return_value=LLMResponse(
            content='{"intent": "help", "confidence": 0.9}',
            model="gpt-4o-mini",
            usage={"prompt_tokens": 80, "completion_tokens": 10, "total_tokens": 90},
        ))
        return service

    @pytest.fixture
    def classifier(self, mock_llm_service):
        return LLMIntentClassifier(
            mock_llm_service,
            categories=["greeting", "help", "general"],
            category_descriptions={"help": "User needs help or has a question"},
        )

    def test_classify(self, classifier):
        result = classifier.classify("can you assist me")

        assert result.intent == "help"
        assert result.confidence == 0.9
        assert result.method == ClassificationMethod.LLM

    def test_prompt_lists_closed_category_set(self, classifier, mock_llm_service):
        classifier.classify("hello")

        messages = mock_llm_service.generate.call_args.kwargs["messages"]
        assert messages[0].role == "system"
        assert "User needs help or has a question" in messages[0].content
        assert "greeting, help, general" in messages[0].content
        assert messages[1].content == "hello"

    def test_usage_recorded_separately(self, classifier):
        result = classifier.classify("hello")
        assert result.metadata["classification_usage"]["total_tokens"] == 90

    def test_json_embedded_in_text(self, classifier, mock_llm_service):
        mock_llm_service.generate.return_value = LLMResponse(
            content='Sure! {"intent": "Greeting", "confidence": 0.8} done'
        )
        result = classifier.classify("hi")

        assert result.intent == "greeting"

    def test_unparseable_reply_degrades_to_unknown(self, classifier, mock_llm_service):
        """파싱 실패 시 unknown"""
        mock_llm_service.generate.return_value = LLMResponse(content="I think it's help")
        result = classifier.classify("hi")

        assert result.intent == UNKNOWN_INTENT
        assert result.confidence == 0.0
        assert result.metadata["parse_error"] is True

    def test_unknown_category_degrades_to_unknown(self, classifier, mock_llm_service):
        mock_llm_service.generate.return_value = LLMResponse(
            content='{"intent": "billing", "confidence": 0.99}'
        )
        result = classifier.classify("invoice")

        assert result.intent == UNKNOWN_INTENT
        assert result.confidence == 0.0

    def test_transport_error_raises_classification_failure(self, classifier, mock_llm_service):
        """전송 실패는 ClassificationFailure로 보고"""
        mock_llm_service.generate.side_effect = LLMServiceError(
            "timed out", provider="openai", timeout=True
        )

        with pytest.raises(ClassificationFailure):
            classifier.classify("hi")

    def test_empty_categories_rejected(self, mock_llm_service):
        with pytest.raises(ConfigurationError):
            LLMIntentClassifier(mock_llm_service, categories=[])

    def test_from_provider_builds_own_backend(self):
        classifier = LLMIntentClassifier.from_provider(
            ProviderConfig("dummy", "classifier-model"),
            categories=["greeting", "help"],
            category_descriptions={"greeting": "User says hello"},
        )

        assert isinstance(classifier.llm_service, DummyLLM)
        assert classifier.llm_service.model == "classifier-model"
        assert classifier.categories == ("greeting", "help")
        assert "User says hello" in classifier.system_prompt

    def test_from_provider_unsupported_provider(self):
        with pytest.raises(ConfigurationError):
            LLMIntentClassifier.from_provider(ProviderConfig("gemini", "x"), categories=["greeting"])

    def test_empty_openai_reply_raises_classification_failure(self):
        """choices가 빈 응답도 전송 실패로 보고 (키워드 결과로 복구 가능)"""
        service = OpenAILLM(model="gpt-4o-mini", api_key="test-key")
        service.client = Mock()
        service.client.chat.completions.create.return_value = SimpleNamespace(
            model="gpt-4o-mini", choices=[], usage=None
        )
        classifier = LLMIntentClassifier(service, categories=["greeting", "help"])

        with pytest.raises(ClassificationFailure):
            classifier.classify("hi")


class TestHybridIntentResolver:
    """HybridIntentResolver 테스트"""

    @pytest.fixture
    def keyword(self):
        classifier = Mock()
        classifier.classify = Mock(return_value=IntentResult("greeting", confidence=0.8))
        return classifier

    @pytest.fixture
    def llm(self):
        classifier = Mock()
        classifier.classify = Mock(
            return_value=IntentResult("help", confidence=0.9, method=ClassificationMethod.LLM)
        )
        return classifier

    def test_confident_keyword_skips_llm(self, keyword, llm):
        """키워드 신뢰도 ≥ 임계값이면 LLM 미호출"""
        result = HybridIntentResolver(keyword, llm, confidence_threshold=0.5).resolve("hi")

        llm.classify.assert_not_called()
        assert result.intent == "greeting"
        assert result.method == ClassificationMethod.KEYWORD

    def test_low_confidence_uses_llm_result(self, keyword, llm):
        """키워드 신뢰도 < 임계값이면 LLM 결과 채택"""
        keyword.classify.return_value = IntentResult("greeting", confidence=0.2)

        result = HybridIntentResolver(keyword, llm, confidence_threshold=0.5).resolve("hm")

        llm.classify.assert_called_once_with("hm")
        assert result.intent == "help"
        assert result.confidence == 0.9
        assert result.method == ClassificationMethod.LLM

    def test_llm_result_wins_even_if_less_confident(self, keyword, llm):
        keyword.classify.return_value = IntentResult("greeting", confidence=0.4)
        llm.classify.return_value = IntentResult("general", confidence=0.1)

        result = resolve_intent("x", keyword, llm, confidence_threshold=0.5)

        assert result.intent == "general"
        assert result.method == ClassificationMethod.LLM

    def test_without_llm_returns_keyword(self, keyword):
        keyword.classify.return_value = IntentResult("greeting", confidence=0.1)

        result = HybridIntentResolver(keyword).resolve("x")

        assert result.intent == "greeting"
        assert result.method == ClassificationMethod.KEYWORD

    def test_classification_failure_recovers_to_keyword(self, keyword, llm):
        """LLM 분류 실패 시 키워드 결과로 복구"""
        keyword.classify.return_value = IntentResult("greeting", confidence=0.2)
        llm.classify.side_effect = ClassificationFailure("network down")

        result = HybridIntentResolver(keyword, llm).resolve("x")

        assert result.intent == "greeting"
        assert result.confidence == 0.2
        assert result.method == ClassificationMethod.KEYWORD
        assert result.metadata["llm_fallback_error"] == "network down"

    def test_invalid_threshold_rejected(self, keyword):
        with pytest.raises(ConfigurationError):
            HybridIntentResolver(keyword, confidence_threshold=1.5)

    def test_end_to_end_with_real_classifiers(self, keyword_classifier):
        """실제 분류기 조합 (LLM은 Mock 서비스)"""
        service = Mock()
        service.generate = Mock(return_value=LLMResponse(
            content='{"intent": "technical", "confidence": 0.7}'
        ))
        llm = LLMIntentClassifier(service, categories=["technical", "general"])
        resolver = HybridIntentResolver(keyword_classifier, llm, confidence_threshold=0.5)

        # "help" 1/3 매칭 → 신뢰도 0.33 → LLM 호출
        result = resolver.resolve("please help, my app crashes")

        assert result.intent == "technical"
        assert result.method == ClassificationMethod.LLM
