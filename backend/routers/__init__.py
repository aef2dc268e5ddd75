"""Routers module - FastAPI route handlers"""

from . import config, prompt_to_code

__all__ = ["config", "prompt_to_code"]
