"""
LLM Service - Streams chat completions from different LLM providers
"""

from __future__ import annotations

import asyncio
import json
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable

import aiohttp

from models.prompt_to_code import ChatMessage, ChatRole
from services.errors import ConfigurationError, LLMServiceError

logger = logging.getLogger(__name__)

SUPPORTED_PROVIDERS = ("openai", "vllm", "gemini")


class LLMService:
    """Service for streaming chat completions from the configured provider"""

    def __init__(self, config: dict[str, Any]):
        self.config = config
        self.provider = config.get("provider", "openai")
        if self.provider not in SUPPORTED_PROVIDERS:
            raise ConfigurationError(f"Unsupported provider: {self.provider}")

    # ========== Config Helpers ==========

    def _provider_config(self) -> dict[str, Any]:
        return self.config.get(self.provider, {})

    def _get_openai_config(self) -> tuple[str, str, dict[str, str]]:
        """Get OpenAI config: (model, url, headers). Raises if api_key missing."""
        cfg = self.config.get("openai", {})
        api_key = cfg.get("apiKey")
        if not api_key:
            raise ConfigurationError("OpenAI API key not configured")
        model = cfg.get("model", "gpt-4o")
        base_url = cfg.get("endpoint", "https://api.openai.com").rstrip("/")
        url = f"{base_url}/v1/chat/completions"
        headers = {"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"}
        return model, url, headers

    def _get_vllm_config(self) -> tuple[str, str, dict[str, str]]:
        """Get vLLM config: (model, url, headers)."""
        cfg = self.config.get("vllm", {})
        endpoint = cfg.get("endpoint", "http://localhost:8000").rstrip("/")
        model = cfg.get("model", "default")
        url = f"{endpoint}/v1/chat/completions"
        headers = {"Content-Type": "application/json"}
        if cfg.get("apiKey"):
            headers["Authorization"] = f"Bearer {cfg['apiKey']}"
        return model, url, headers

    def _get_gemini_config(self) -> tuple[str, str]:
        """Get Gemini config: (model, url). Raises if api_key missing."""
        cfg = self.config.get("gemini", {})
        api_key = cfg.get("apiKey")
        if not api_key:
            raise ConfigurationError("Gemini API key not configured")
        model = cfg.get("model", "gemini-2.5-flash")
        url = (
            f"https://generativelanguage.googleapis.com/v1beta/models/{model}"
            f":streamGenerateContent?key={api_key}&alt=sse"
        )
        return model, url

    # ========== Payload Builders ==========

    def _build_openai_payload(
        self,
        model: str,
        messages: list[ChatMessage],
        temperature: float,
        functions: list[dict[str, Any]],
    ) -> dict[str, Any]:
        """Build OpenAI-compatible request payload"""
        cfg = self._provider_config()
        payload: dict[str, Any] = {
            "model": model,
            "messages": [{"role": m.role.value, "content": m.content} for m in messages],
            "max_tokens": cfg.get("maxTokens", 4096),
            "temperature": temperature,
            "stream": True,
        }
        if "topP" in cfg:
            payload["top_p"] = cfg["topP"]
        if functions:
            payload["tools"] = [{"type": "function", "function": f} for f in functions]
        return payload

    def _build_gemini_payload(
        self,
        messages: list[ChatMessage],
        temperature: float,
    ) -> dict[str, Any]:
        """Build Gemini API request payload"""
        cfg = self.config.get("gemini", {})
        system = "\n\n".join(m.content for m in messages if m.role == ChatRole.SYSTEM)
        contents = [
            {
                "role": "model" if m.role == ChatRole.ASSISTANT else "user",
                "parts": [{"text": m.content}],
            }
            for m in messages
            if m.role != ChatRole.SYSTEM
        ]

        payload: dict[str, Any] = {
            "contents": contents,
            "generationConfig": {
                "temperature": temperature,
                "topP": cfg.get("topP", 0.95),
                "maxOutputTokens": cfg.get("maxTokens", 8192),
            },
        }
        if system:
            payload["systemInstruction"] = {"parts": [{"text": system}]}
        return payload

    # ========== Transport ==========

    @asynccontextmanager
    async def _request(
        self,
        url: str,
        payload: dict[str, Any],
        headers: dict[str, str] | None = None,
        timeout_seconds: int = 120,
        provider: str = "API",
    ):
        """Context manager for HTTP POST requests with automatic session cleanup"""
        timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            try:
                async with session.post(url, json=payload, headers=headers) as response:
                    if response.status != 200:
                        error_text = await response.text()
                        logger.error("%s API error (%s): %s", provider, response.status, error_text)
                        raise LLMServiceError(provider, error_text, response.status)
                    yield response
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                logger.error("%s transport error: %s", provider, e)
                raise LLMServiceError(provider, str(e) or type(e).__name__) from e

    async def _stream_response(
        self,
        url: str,
        payload: dict[str, Any],
        headers: dict[str, str] | None,
        provider: str,
        line_parser: Callable[[str], str | None],
    ) -> AsyncIterator[str]:
        """Stream response and yield parsed content"""
        timeout_seconds = self._provider_config().get("timeoutSeconds", 120)
        async with self._request(url, payload, headers, timeout_seconds, provider) as response:
            async for line in response.content:
                line_text = line.decode("utf-8").strip()
                content = line_parser(line_text)
                if content:
                    yield content

    # ========== Stream Parsers ==========

    def _parse_sse_line(self, line_text: str, extractor) -> str | None:
        """Parse SSE line with given extractor function"""
        if not line_text.startswith("data: "):
            return None
        data_str = line_text[6:]
        if data_str == "[DONE]":
            return None
        try:
            data = json.loads(data_str)
        except json.JSONDecodeError:
            return None
        return extractor(data)

    def _extract_openai_delta(self, data: dict[str, Any]) -> str | None:
        """Extract content delta from OpenAI stream data"""
        if "error" in data:
            raise LLMServiceError(self.provider, str(data["error"]))
        if data.get("choices"):
            delta = data["choices"][0].get("delta", {})
            return delta.get("content", "") or None
        return None

    def _extract_gemini_text(self, data: dict[str, Any]) -> str | None:
        """Extract text from Gemini stream data"""
        if "error" in data:
            raise LLMServiceError("Gemini", str(data["error"]))
        candidates = data.get("candidates") or []
        if candidates:
            parts = candidates[0].get("content", {}).get("parts", [])
            if parts and "text" in parts[0]:
                return parts[0]["text"]
        return None

    def parse_openai_stream_line(self, line_text: str) -> str | None:
        """Parse a single SSE line from an OpenAI-compatible stream"""
        return self._parse_sse_line(line_text, self._extract_openai_delta)

    def parse_gemini_stream_line(self, line_text: str) -> str | None:
        """Parse a single SSE line from a Gemini stream"""
        return self._parse_sse_line(line_text, self._extract_gemini_text)

    # ========== Public API ==========

    def stream_chat(
        self,
        messages: list[ChatMessage],
        temperature: float | None = None,
        functions: list[dict[str, Any]] | None = None,
    ) -> AsyncIterator[str]:
        """Stream an answer to `messages` fragment by fragment.

        `temperature` overrides the configured value; `functions` declares
        callable tools and is left empty for plain completions.
        """
        if temperature is None:
            temperature = self._provider_config().get("temperature", 0.0)
        functions = functions or []

        if self.provider == "gemini":
            model, url = self._get_gemini_config()
            payload = self._build_gemini_payload(messages, temperature)
            headers = None
            parser = self.parse_gemini_stream_line
            provider = "Gemini"
        else:
            if self.provider == "vllm":
                model, url, headers = self._get_vllm_config()
                provider = "vLLM"
            else:
                model, url, headers = self._get_openai_config()
                provider = "OpenAI"
            payload = self._build_openai_payload(model, messages, temperature, functions)
            parser = self.parse_openai_stream_line

        logger.info(
            "Streaming %s completion with model %s (%d messages, temperature %s)",
            provider,
            model,
            len(messages),
            temperature,
        )
        return self._stream_response(url, payload, headers, provider, parser)
