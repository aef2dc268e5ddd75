"""Service-layer exceptions"""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Provider settings are missing or unsupported"""


class LLMServiceError(Exception):
    """The LLM provider rejected the request or the transport failed"""

    def __init__(self, provider: str, message: str, status: int | None = None):
        self.provider = provider
        self.status = status
        prefix = f"{provider} API error" + (f" ({status})" if status is not None else "")
        super().__init__(f"{prefix}: {message}")
