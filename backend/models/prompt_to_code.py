"""Prompt-to-code data models"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, model_validator


class CursorPosition(BaseModel):
    """Zero-based position in a document"""

    model_config = ConfigDict(frozen=True)

    line: int = 0
    character: int = 0


class CursorRange(BaseModel):
    """Range between two cursor positions"""

    model_config = ConfigDict(frozen=True)

    start: CursorPosition = CursorPosition()
    end: CursorPosition = CursorPosition()


class LineAnnotation(BaseModel):
    """Diagnostic attached to a line (1-indexed)"""

    type: str
    line: int
    message: str


class EditorContent(BaseModel):
    """Full content of the focused editor"""

    content: str = ""
    lines: list[str] = []
    selections: list[CursorRange] = []
    cursor_position: CursorPosition | None = None
    line_annotations: list[LineAnnotation] = []


class SourceSelection(BaseModel):
    """The selection a prompt-to-code request operates on"""

    model_config = ConfigDict(frozen=True)

    all_code: str = ""
    range: CursorRange = CursorRange()
    document_url: str
    project_root_url: str = ""
    language: str = "plaintext"


class EditorInformation(BaseModel):
    """What the IDE knows about the document around the selection"""

    editor_content: EditorContent | None = None
    selected_content: str = ""
    selected_lines: list[str] = []
    document_url: str
    project_url: str = ""
    relative_path: str = ""
    language: str = "plaintext"

    @classmethod
    def from_source(cls, source: SourceSelection, code: str) -> "EditorInformation":
        """Build editor information when the IDE did not send any"""
        return cls(
            editor_content=EditorContent(
                content=source.all_code,
                selections=[source.range],
            ),
            selected_content=code,
            document_url=source.document_url,
            project_url=source.project_root_url,
            language=source.language,
        )


class ChatRole(str, Enum):
    """Roles of a conversation message"""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    """A single message in the conversation history"""

    role: ChatRole
    content: str


class ExtractionSnapshot(BaseModel):
    """Best-effort (code, description) pair derived from a partial answer"""

    model_config = ConfigDict(frozen=True)

    code: str = ""
    description: str = ""

    @model_validator(mode="after")
    def _description_requires_code(self) -> "ExtractionSnapshot":
        if self.description and not self.code:
            raise ValueError("description without code")
        return self

    def as_tuple(self) -> tuple[str, str]:
        return self.code, self.description


class ModifyCodeRequest(BaseModel):
    """Request to rewrite a code selection"""

    session_id: str = "default"
    code: str
    requirement: str
    source: SourceSelection
    editor: EditorInformation | None = None
    is_detached: bool = False
    extra_system_prompt: str | None = None
    generate_description: bool | None = None  # None: use configured preference


class StopRequest(BaseModel):
    """Request to stop an in-flight modification"""

    session_id: str = "default"


class SnapshotEvent(BaseModel):
    """SSE stream event"""

    type: str  # "snapshot", "done", "error", "cancelled"
    code: str | None = None
    description: str | None = None
    error: str | None = None
