"""Tests for LLMClient (Claude API wrapper)."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from lei_auditor.clients.llm_client import REVIEWER_SYSTEM, LLMClient, LLMResponse

PATCH_TARGET = "lei_auditor.clients.llm_client.anthropic.AsyncAnthropic"


def _make_api_message(text: str, input_tokens: int = 100, output_tokens: int = 50) -> MagicMock:
    """Build a mock anthropic Message-like object."""
    message = MagicMock()
    message.usage.input_tokens = input_tokens
    message.usage.output_tokens = output_tokens
    message.content = [MagicMock(text=text)]
    return message


def _client_returning(mock_cls: MagicMock, message: MagicMock) -> MagicMock:
    mock_client = MagicMock()
    mock_client.messages.create = AsyncMock(return_value=message)
    mock_cls.return_value = mock_client
    return mock_client


class TestLLMClientInit:
    def test_init_default_creates_client_with_no_kwargs(self):
        with patch(PATCH_TARGET) as mock_cls:
            LLMClient()
            mock_cls.assert_called_once_with()

    def test_init_with_api_key_and_timeout(self):
        with patch(PATCH_TARGET) as mock_cls:
            LLMClient(api_key="test-key", timeout=30.0)
            mock_cls.assert_called_once_with(api_key="test-key", timeout=30.0)


class TestLLMClientGenerate:
    async def test_generate_returns_llm_response(self):
        with patch(PATCH_TARGET) as mock_cls:
            _client_returning(mock_cls, _make_api_message("olá", input_tokens=100, output_tokens=50))

            llm = LLMClient()
            result = await llm.generate([{"role": "user", "content": "oi"}])

        assert isinstance(result, LLMResponse)
        assert result.text == "olá"
        assert (result.input_tokens, result.output_tokens) == (100, 50)

    async def test_request_parameters(self):
        with patch(PATCH_TARGET) as mock_cls:
            mock_client = _client_returning(mock_cls, _make_api_message("x"))

            llm = LLMClient(model="claude-sonnet-4-5-20250929", max_tokens=1000, temperature=0.2)
            await llm.generate([{"role": "user", "content": "oi"}], system="sys")

        kwargs = mock_client.messages.create.call_args.kwargs
        assert kwargs["model"] == "claude-sonnet-4-5-20250929"
        assert kwargs["max_tokens"] == 1000
        assert kwargs["temperature"] == 0.2
        assert kwargs["system"] == "sys"

    async def test_no_system_omitted(self):
        with patch(PATCH_TARGET) as mock_cls:
            mock_client = _client_returning(mock_cls, _make_api_message("x"))

            await LLMClient().generate([{"role": "user", "content": "oi"}])

        assert "system" not in mock_client.messages.create.call_args.kwargs

    async def test_token_log_accumulates(self):
        with patch(PATCH_TARGET) as mock_cls:
            _client_returning(mock_cls, _make_api_message("r", input_tokens=20, output_tokens=8))

            llm = LLMClient()
            await llm.generate([{"role": "user", "content": "a"}])
            await llm.generate([{"role": "user", "content": "b"}], model="claude-sonnet-4-5-20250929")

        assert llm._token_log == [
            ("claude-haiku-4-5-20251001", 20, 8),
            ("claude-sonnet-4-5-20250929", 20, 8),
        ]

    async def test_errors_propagate_without_retry(self):
        with patch(PATCH_TARGET) as mock_cls:
            mock_client = MagicMock()
            mock_client.messages.create = AsyncMock(side_effect=RuntimeError("boom"))
            mock_cls.return_value = mock_client

            llm = LLMClient()
            with pytest.raises(RuntimeError, match="boom"):
                await llm.generate([{"role": "user", "content": "a"}])

        mock_client.messages.create.assert_called_once()
        assert llm._token_log == []


class TestLLMClientInvoke:
    async def test_invoke_wraps_text(self):
        with patch(PATCH_TARGET) as mock_cls:
            _client_returning(mock_cls, _make_api_message('{"suggestions": []}'))

            result = await LLMClient().invoke([{"role": "user", "content": "revise"}])

        assert result == {"response": '{"suggestions": []}'}

    async def test_invoke_puts_document_in_system_prompt(self):
        with patch(PATCH_TARGET) as mock_cls:
            mock_client = _client_returning(mock_cls, _make_api_message("ok"))

            await LLMClient().invoke(
                [{"role": "user", "content": "revise"}], document_content="Texto do capítulo"
            )

        kwargs = mock_client.messages.create.call_args.kwargs
        assert kwargs["system"].startswith(REVIEWER_SYSTEM)
        assert "Texto do capítulo" in kwargs["system"]
        assert kwargs["messages"] == [{"role": "user", "content": "revise"}]

    async def test_invoke_without_document(self):
        with patch(PATCH_TARGET) as mock_cls:
            mock_client = _client_returning(mock_cls, _make_api_message("ok"))

            await LLMClient().invoke([{"role": "user", "content": "revise"}])

        assert mock_client.messages.create.call_args.kwargs["system"] == REVIEWER_SYSTEM


class TestLLMClientTokenSummary:
    def test_summary_totals_and_reset(self):
        with patch(PATCH_TARGET):
            llm = LLMClient()
            llm._token_log = [
                ("claude-haiku-4-5-20251001", 100, 50),
                ("claude-haiku-4-5-20251001", 200, 80),
            ]

        summary = llm.get_token_summary()

        assert summary["input"] == 300
        assert summary["output"] == 130
        assert len(summary["calls"]) == 2
        assert llm.get_token_summary() == {"input": 0, "output": 0, "calls": []}
