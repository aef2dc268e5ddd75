"""Models module - Pydantic data models"""

from .prompt_to_code import (
    ChatMessage,
    ChatRole,
    CursorPosition,
    CursorRange,
    EditorContent,
    EditorInformation,
    ExtractionSnapshot,
    LineAnnotation,
    ModifyCodeRequest,
    SnapshotEvent,
    SourceSelection,
    StopRequest,
)

__all__ = [
    # Editor models
    "CursorPosition",
    "CursorRange",
    "EditorContent",
    "EditorInformation",
    "LineAnnotation",
    "SourceSelection",
    # Conversation models
    "ChatMessage",
    "ChatRole",
    # Prompt-to-code models
    "ExtractionSnapshot",
    "ModifyCodeRequest",
    "SnapshotEvent",
    "StopRequest",
]
