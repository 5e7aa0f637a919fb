"""Claude API wrapper acting as the report review service."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import anthropic

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-haiku-4-5-20251001"

REVIEWER_SYSTEM = """\
Você é um consultor especialista em relatórios de projetos de P&D submetidos \
ao MCTI no âmbito da Lei do Bem (Lei 11.196/2005).
Revise o texto do capítulo com foco em redação técnica, clareza, objetividade \
e adequação à linguagem de pesquisa e desenvolvimento.
Nunca invente fatos, números ou resultados que não estejam no documento."""


@dataclass
class LLMResponse:
    """Response from the LLM including usage metadata."""

    text: str
    input_tokens: int
    output_tokens: int


class LLMClient:
    """Async Claude API client.

    Failed calls are not retried; the caller decides whether to ask again.
    """

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float | None = None,
        model: str = DEFAULT_MODEL,
        max_tokens: int = 4096,
        temperature: float = 0.0,
    ):
        kwargs: dict = {}
        if api_key is not None:
            kwargs["api_key"] = api_key
        if timeout is not None:
            kwargs["timeout"] = timeout
        self.client = anthropic.AsyncAnthropic(**kwargs)
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self._token_log: list[tuple[str, int, int]] = []  # (model, input_tokens, output_tokens)

    async def _call_api(
        self,
        messages: list[dict],
        system: str,
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> anthropic.types.Message:
        kwargs: dict = {
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": messages,
        }
        if system:
            kwargs["system"] = system
        return await self.client.messages.create(**kwargs)

    async def generate(
        self,
        messages: list[dict],
        system: str = "",
        model: str | None = None,
    ) -> LLMResponse:
        """Send a conversation to Claude and return the text response with usage."""
        model = model or self.model
        logger.debug("LLM call: model=%s, %d messages", model, len(messages))
        try:
            message = await self._call_api(
                messages=messages,
                system=system,
                model=model,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except Exception:
            logger.error("LLM call failed", exc_info=True)
            raise
        input_tokens = message.usage.input_tokens
        output_tokens = message.usage.output_tokens
        logger.debug("LLM response: %d input, %d output tokens", input_tokens, output_tokens)
        self._token_log.append((model, input_tokens, output_tokens))
        text = "".join(
            block.text for block in message.content if isinstance(getattr(block, "text", None), str)
        )
        return LLMResponse(text=text, input_tokens=input_tokens, output_tokens=output_tokens)

    async def invoke(self, messages: list[dict], document_content: str = "") -> dict:
        """Review-service entry point.

        Takes ``messages`` as ``[{role, content}]`` plus the raw chapter text and
        answers ``{"response": <free-form text>}``.
        """
        system = REVIEWER_SYSTEM
        if document_content:
            system += f"\n\n## Documento em revisão\n{document_content}"
        response = await self.generate(messages=messages, system=system)
        return {"response": response.text}

    def get_token_summary(self) -> dict:
        """Return accumulated token usage and reset the log."""
        summary = {
            "input": sum(t[1] for t in self._token_log),
            "output": sum(t[2] for t in self._token_log),
            "calls": list(self._token_log),
        }
        self._token_log.clear()
        return summary
