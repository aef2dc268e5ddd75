"""Global test fixtures."""

import asyncio
from collections.abc import AsyncGenerator, Generator
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from main import create_app
from models.prompt_to_code import CursorPosition, CursorRange, SourceSelection
from routers import prompt_to_code
from services.config_manager import ConfigManager


class ScriptedLLMService:
    """Stand-in for LLMService that replays a fixed list of fragments."""

    def __init__(
        self,
        fragments: list[str],
        error: Exception | None = None,
        hang: bool = False,
    ) -> None:
        self.fragments = fragments
        self.error = error
        self.hang = hang
        self.calls: list[dict[str, Any]] = []
        self.exhausted = False
        self.closed = False

    def stream_chat(self, messages, temperature=None, functions=None):
        self.calls.append(
            {"messages": list(messages), "temperature": temperature, "functions": functions}
        )
        return self._stream()

    async def _stream(self):
        try:
            for fragment in self.fragments:
                await asyncio.sleep(0)
                yield fragment
            self.exhausted = True
            if self.error is not None:
                raise self.error
            if self.hang:
                await asyncio.Event().wait()
        finally:
            self.closed = True


@pytest.fixture
def test_config() -> dict[str, Any]:
    """Configuration with descriptions enabled and no preferred language."""
    return {
        "provider": "openai",
        "openai": {"apiKey": "sk-test", "model": "gpt-4o", "temperature": 0.7},
        "chatLanguage": "",
        "promptToCode": {
            "generateDescription": True,
            "generateDescriptionInUserPreferredLanguage": True,
        },
    }


@pytest.fixture
def source() -> SourceSelection:
    """Selection of lines 2-3 of a Swift file."""
    return SourceSelection(
        all_code="struct A {\n    let a = 1\n    let b = 2\n}\n",
        range=CursorRange(
            start=CursorPosition(line=1, character=0),
            end=CursorPosition(line=2, character=13),
        ),
        document_url="file:///Users/dev/Project/Sources/A.swift",
        project_root_url="file:///Users/dev/Project",
        language="swift",
    )


@pytest.fixture
def config_manager(tmp_path: Path) -> Generator[ConfigManager, None, None]:
    """ConfigManager singleton backed by a temporary directory."""
    manager = ConfigManager(config_dir=tmp_path / "config")
    ConfigManager.reset_instance(manager)
    yield manager
    ConfigManager.reset_instance(None)


@pytest.fixture(autouse=True)
def reset_sse_app_status():
    """sse-starlette keeps a module-level exit event bound to the first loop."""
    from sse_starlette.sse import AppStatus

    if hasattr(AppStatus, "should_exit_event"):
        AppStatus.should_exit_event = None
    yield


@pytest.fixture(autouse=True)
def clear_sessions():
    """Drop prompt-to-code sessions between tests."""
    prompt_to_code.sessions.clear()
    yield
    prompt_to_code.sessions.clear()


@pytest_asyncio.fixture
async def client(config_manager: ConfigManager) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP test client."""
    app = create_app()
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


@pytest.fixture
def scripted_llm() -> type[ScriptedLLMService]:
    """The scripted provider class, for tests that build their own streams."""
    return ScriptedLLMService
