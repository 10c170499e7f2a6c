"""Tests for arielle.query.intents."""

from __future__ import annotations

import pytest

from conftest import FakeProvider

from arielle.exceptions import IntentDetectionFailure, ProviderError
from arielle.query.intents import IntentDetector, parse_intent_lines


class TestParseIntentLines:
    def test_bullets_only(self) -> None:
        text = "Here you go:\n- create a customer\n  - charge them  \n-\n* ignored\n- "
        assert parse_intent_lines(text) == ["create a customer", "charge them"]

    def test_empty(self) -> None:
        assert parse_intent_lines("") == []


class TestDetectIntents:
    @pytest.mark.asyncio
    async def test_single_intent(self, output) -> None:
        provider = FakeProvider(responses=["false"])
        detector = IntentDetector(provider, output)

        assert await detector.detect_intents("how do I create a customer") == [
            "how do I create a customer"
        ]
        assert len(provider.prompts) == 1

    @pytest.mark.asyncio
    async def test_multi_intent(self, output) -> None:
        provider = FakeProvider(responses=["true", "- create a customer\n- charge them"])
        detector = IntentDetector(provider, output)

        assert await detector.detect_intents("create a customer and charge them") == [
            "create a customer",
            "charge them",
        ]

    @pytest.mark.asyncio
    async def test_classification_is_case_insensitive(self, output) -> None:
        provider = FakeProvider(responses=["  True.", "- a\n- b"])
        assert await IntentDetector(provider, output).detect_intents("a and b") == ["a", "b"]

    @pytest.mark.asyncio
    async def test_sampling_settings(self, output) -> None:
        provider = FakeProvider(responses=["true", "- a"])
        await IntentDetector(provider, output).detect_intents("a and b")
        assert provider.calls == [
            {"temperature": 0.1, "max_tokens": 10},
            {"temperature": 0.3, "max_tokens": 200},
        ]

    @pytest.mark.asyncio
    async def test_classification_failure_falls_back(self, output, capsys) -> None:
        provider = FakeProvider(responses=[ProviderError("down")])
        assert await IntentDetector(provider, output).detect_intents("q") == ["q"]
        assert "Intent classification failed" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_decomposition_failure_falls_back(self, output) -> None:
        provider = FakeProvider(responses=["true", ProviderError("down")])
        assert await IntentDetector(provider, output).detect_intents("q") == ["q"]

    @pytest.mark.asyncio
    async def test_unexpected_classification_error_falls_back(self, output, capsys) -> None:
        provider = FakeProvider(responses=[RuntimeError("sdk blew up")])
        assert await IntentDetector(provider, output).detect_intents("q") == ["q"]
        assert "sdk blew up" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_unexpected_decomposition_error_falls_back(self, output) -> None:
        provider = FakeProvider(responses=["true", TimeoutError("slow")])
        assert await IntentDetector(provider, output).detect_intents("q") == ["q"]

    @pytest.mark.asyncio
    async def test_empty_decomposition_falls_back(self, output) -> None:
        provider = FakeProvider(responses=["true", "I cannot split this."])
        assert await IntentDetector(provider, output).detect_intents("q") == ["q"]


class TestSteps:
    @pytest.mark.asyncio
    async def test_is_multi_intent_wraps_provider_error(self, output) -> None:
        detector = IntentDetector(FakeProvider(responses=[ProviderError("x")]), output)
        with pytest.raises(IntentDetectionFailure):
            await detector.is_multi_intent("q")

    @pytest.mark.asyncio
    async def test_decompose_prompt_contains_query(self, output) -> None:
        provider = FakeProvider(responses=["- one"])
        assert await IntentDetector(provider, output).decompose("one and two") == ["one"]
        assert 'Query: "one and two"' in provider.prompts[0]
