"""
Prompt-to-Code Service - Rewrite a code selection with a streamed LLM answer
"""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Callable

from models.prompt_to_code import EditorInformation, ExtractionSnapshot, SourceSelection
from services.chat_service import ChatService
from services.config_manager import ConfigManager
from services.llm_service import LLMService
from services.prompt_builder import (
    build_priming_messages,
    build_rule,
    build_system_prompt,
    description_language_clause,
    extract_annotations,
)
from services.snapshot_stream import stream_snapshots

logger = logging.getLogger(__name__)


class PromptToCodeService:
    """Runs prompt-to-code requests, one at a time.

    Every `modify_code` call stops the previous request and starts over with
    a fresh `ChatService`.
    """

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        llm_service_factory: Callable[[dict[str, Any]], LLMService] = LLMService,
    ):
        self._config = config
        self._llm_service_factory = llm_service_factory
        self.chat_service: ChatService | None = None

    def _get_config(self) -> dict[str, Any]:
        if self._config is not None:
            return self._config
        return ConfigManager.get_instance().get_config()

    @property
    def is_responding(self) -> bool:
        return self.chat_service is not None and self.chat_service.is_receiving

    def stop_responding(self) -> bool:
        """Stop the active request; a no-op when nothing is running"""
        if self.chat_service is None:
            return False
        return self.chat_service.stop_receiving_message()

    async def modify_code(
        self,
        code: str,
        requirement: str,
        source: SourceSelection,
        is_detached: bool = False,
        extra_system_prompt: str | None = None,
        generate_description: bool | None = None,
        editor: EditorInformation | None = None,
    ) -> AsyncIterator[ExtractionSnapshot]:
        """Ask the model to apply `requirement` to `code`.

        Returns a single-pass stream of snapshots, one per answer fragment.
        """
        self.stop_responding()

        config = self._get_config()
        if generate_description is None:
            generate_description = config.get("promptToCode", {}).get("generateDescription", True)
        if editor is None:
            editor = EditorInformation.from_source(source, code)

        rule = build_rule(
            editor.language,
            code,
            generate_description,
            description_language_clause(config) if generate_description else "",
        )
        system_prompt = build_system_prompt(editor, extra_system_prompt, rule)
        annotations = "" if is_detached else extract_annotations(editor, source)

        chat_service = ChatService(
            system_prompt,
            config,
            llm_service=self._llm_service_factory(config),
            temperature=0.0,
        )
        chat_service.append(*build_priming_messages(code, annotations))
        self.chat_service = chat_service

        logger.info(
            "Modifying %d chars of %s code (detached=%s, description=%s)",
            len(code),
            editor.language,
            is_detached,
            generate_description,
        )
        fragments = await chat_service.send(requirement)
        return stream_snapshots(fragments)
