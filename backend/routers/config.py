"""Configuration API endpoints"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from services.config_manager import ConfigManager
from services.llm_service import SUPPORTED_PROVIDERS

router = APIRouter()


class PromptToCodePreferences(BaseModel):
    """Description generation preferences"""

    generateDescription: bool | None = None
    generateDescriptionInUserPreferredLanguage: bool | None = None


class ConfigUpdateRequest(BaseModel):
    """Request to update configuration"""

    provider: str | None = None
    openai: dict | None = None
    vllm: dict | None = None
    gemini: dict | None = None
    chatLanguage: str | None = None
    promptToCode: PromptToCodePreferences | None = None


class ConfigResponse(BaseModel):
    """Configuration response"""

    provider: str
    openai: dict
    vllm: dict
    gemini: dict
    chatLanguage: str
    promptToCode: dict


def mask_key(key: str) -> str:
    if not key:
        return ""
    if len(key) <= 8:
        return "*" * len(key)
    return key[:4] + "*" * (len(key) - 8) + key[-4:]


@router.get("", response_model=ConfigResponse)
async def get_config() -> ConfigResponse:
    """Get current configuration with API keys masked"""
    config = ConfigManager.get_instance().get_config()

    providers = {}
    for name in SUPPORTED_PROVIDERS:
        provider_config = config.get(name, {})
        provider_config["apiKey"] = mask_key(provider_config.get("apiKey", ""))
        providers[name] = provider_config

    return ConfigResponse(
        provider=config.get("provider", "openai"),
        chatLanguage=config.get("chatLanguage", ""),
        promptToCode=config.get("promptToCode", {}),
        **providers,
    )


@router.put("")
async def update_config(request: ConfigUpdateRequest) -> dict[str, Any]:
    """Update configuration"""
    if request.provider and request.provider not in SUPPORTED_PROVIDERS:
        raise HTTPException(status_code=400, detail=f"Unsupported provider: {request.provider}")

    config_manager = ConfigManager.get_instance()
    current_config = config_manager.get_config()

    # Update only provided fields
    if request.provider:
        current_config["provider"] = request.provider
    for name in SUPPORTED_PROVIDERS:
        update = getattr(request, name)
        if update:
            current_config[name] = {**current_config.get(name, {}), **update}
    if request.chatLanguage is not None:
        current_config["chatLanguage"] = request.chatLanguage
    if request.promptToCode is not None:
        current_config["promptToCode"] = {
            **current_config.get("promptToCode", {}),
            **request.promptToCode.model_dump(exclude_none=True),
        }

    config_manager.save_config(current_config)

    return {"status": "success", "message": "Configuration updated"}
