"""컨텍스트 최적화기 테스트"""

import pytest

from ai_pipeline.errors import ConfigurationError
from ai_pipeline.services.context import (
    ContextMode,
    ContextOptimizer,
    ContextSection,
    ContextStrategy,
    estimate_tokens,
)
from ai_pipeline.services.context.optimizer import SECTION_DELIMITER


class TestContextOptimizer:
    """ContextOptimizer 테스트"""

    def test_full_mode_includes_every_section(self, context_optimizer):
        """full 모드는 토픽과 무관하게 전체 포함"""
        result = context_optimizer.build(topics=["pricing"], is_first_message=True)

        assert result.mode == ContextMode.FULL
        assert len(result.sections_included) == result.total_sections == 4
        assert result.sections_included == ("core", "pricing-info", "technical-guide", "misc")
        assert result.token_estimate == result.max_token_estimate

    def test_selective_mode_filters_by_topic(self, context_optimizer):
        """selective 모드: alwaysInclude + 토픽 일치"""
        result = context_optimizer.build(topics={"pricing"}, is_first_message=False)

        assert result.mode == ContextMode.SELECTIVE
        assert "pricing-info" in result.sections_included
        assert "technical-guide" not in result.sections_included
        assert "core" in result.sections_included
        # 토픽 없는 일반 섹션은 제외
        assert "misc" not in result.sections_included

    def test_always_include_without_topics(self, context_optimizer):
        result = context_optimizer.build(topics=[], is_first_message=False)
        assert result.sections_included == ("core",)

    def test_prompt_follows_declared_order(self, sample_sections):
        optimizer = ContextOptimizer(sample_sections, ContextStrategy("selective", "selective"))

        result = optimizer.build(topics=["technical", "pricing"], is_first_message=True)

        assert result.sections_included == ("core", "pricing-info", "technical-guide")
        assert result.system_prompt == SECTION_DELIMITER.join(
            s.content for s in sample_sections[:3]
        )

    def test_token_estimates(self, context_optimizer, sample_sections):
        result = context_optimizer.build(topics=[], is_first_message=False)

        full_text = SECTION_DELIMITER.join(s.content for s in sample_sections)
        assert result.token_estimate == estimate_tokens(sample_sections[0].content)
        assert result.max_token_estimate == estimate_tokens(full_text)
        assert 0.0 < result.savings_ratio < 1.0

    def test_single_topic_string(self, context_optimizer):
        result = context_optimizer.build(topics="pricing", is_first_message=False)
        assert "pricing-info" in result.sections_included

    def test_deterministic(self, context_optimizer):
        """동일 입력이면 동일 결과"""
        first = context_optimizer.build(topics=["technical"], is_first_message=False)
        second = context_optimizer.build(topics=["technical"], is_first_message=False)

        assert first == second
        assert first.system_prompt.encode() == second.system_prompt.encode()

    def test_priority_does_not_reorder(self):
        sections = [
            ContextSection(id="low", name="Low", content="low", priority=1, always_include=True),
            ContextSection(id="high", name="High", content="high", priority=10, always_include=True),
        ]
        result = ContextOptimizer(sections).build(topics=[], is_first_message=False)

        assert result.sections_included == ("low", "high")

    def test_default_strategy(self, sample_sections):
        optimizer = ContextOptimizer(sample_sections)

        assert optimizer.build([], True).mode == ContextMode.FULL
        assert optimizer.build([], False).mode == ContextMode.SELECTIVE

    def test_empty_configuration(self):
        result = ContextOptimizer([]).build(["x"], True)

        assert result.system_prompt == ""
        assert result.total_sections == 0
        assert result.savings_ratio == 0.0


class TestContextConfiguration:
    """설정 검증 테스트"""

    def test_duplicate_section_id_rejected(self):
        with pytest.raises(ConfigurationError):
            ContextOptimizer([
                ContextSection(id="a", name="A", content="a"),
                ContextSection(id="a", name="A2", content="b"),
            ])

    def test_empty_section_id_rejected(self):
        with pytest.raises(ConfigurationError):
            ContextSection(id="", name="A", content="a")

    def test_unknown_mode_rejected(self):
        with pytest.raises(ConfigurationError):
            ContextStrategy("everything", "selective")

    def test_sections_are_immutable(self, sample_sections):
        with pytest.raises(AttributeError):
            sample_sections[0].content = "changed"
