"""
Prompt Builder - System prompt, rules and priming messages for prompt-to-code
"""

from __future__ import annotations

from pathlib import PurePosixPath, PureWindowsPath
from typing import Any
from urllib.parse import unquote, urlparse

from models.prompt_to_code import ChatMessage, ChatRole, EditorInformation, SourceSelection
from services.indentation import common_leading_space_count

TEXT_LANGUAGES = {"markdown", "plaintext"}


def is_text_language(language: str) -> bool:
    """Markup and plain text get writing-oriented prompts instead of coding ones"""
    return language.lower() in TEXT_LANGUAGES


def file_name(document_url: str) -> str:
    """Last path component of a file URL, a POSIX path or a Windows path"""
    parsed = urlparse(document_url)
    if parsed.scheme in ("file", "http", "https") or document_url.startswith("/"):
        path = unquote(parsed.path) or document_url
        return PurePosixPath(path).name
    return PureWindowsPath(document_url).name


def description_language_clause(config: dict[str, Any]) -> str:
    """' in <language>' when descriptions should use the user's preferred language"""
    prefs = config.get("promptToCode", {})
    if not prefs.get("generateDescriptionInUserPreferredLanguage", False):
        return ""
    language = config.get("chatLanguage", "")
    return f" in {language}" if language else ""


def _finishing_steps(index: int, generate_description: bool, text_language: str) -> str:
    if not generate_description:
        return f"{index}. Reply with the result."
    return (
        f"{index}. After the code block, write a clear and concise description "
        f"in 1-3 sentences about what you did in step 1{text_language}.\n"
        f"{index + 1}. Reply with the result."
    )


def build_rule(language: str, code: str, generate_description: bool, text_language: str = "") -> str:
    """Numbered rule block telling the model how to shape its answer"""
    if is_text_language(language):
        if not code:
            steps = [
                "1. Write the content that meets my requirements.",
                "2. Embed the new content in a markdown code block.",
            ]
        else:
            steps = [
                "1. Do what I required.",
                "2. Format the updated content to use the original indentation. Especially the first line.",
                "3. Embed the updated content in a markdown code block.",
                "4. You MUST never translate the content in the code block if it's not requested in the requirements.",
            ]
    else:
        if not code:
            steps = [
                "1. Write the code that meets my requirements.",
                "2. Embed the code in a markdown code block.",
            ]
        else:
            steps = [
                "1. Do what I required.",
                "2. Format the updated code to use the original indentation. Especially the first line.",
                "3. Embed the updated code in a markdown code block.",
            ]
    steps.append(_finishing_steps(len(steps) + 1, generate_description, text_language))
    return "\n".join(steps)


def build_system_prompt(editor: EditorInformation, extra_system_prompt: str | None, rule: str) -> str:
    """System prompt naming the language, the active file and the rules"""
    if is_text_language(editor.language):
        role = f"You are good at writing in {editor.language}."
    else:
        role = f"You are a senior programmer in writing in {editor.language}."

    return f"""{role}
The active file is: {file_name(editor.document_url)}.
{extra_system_prompt or ""}

{rule}"""


def extract_annotations(editor: EditorInformation, source: SourceSelection) -> str:
    """Render the line annotations that fall inside the selection.

    Annotation lines are 1-indexed, the selection range is 0-indexed; the
    rendered line number is relative to the first selected line.
    """
    if editor.editor_content is None:
        return ""

    start_line = source.range.start.line
    end_line = source.range.end.line
    in_range = [
        f"line {annotation.line - start_line}: {annotation.type} {annotation.message}"
        for annotation in editor.editor_content.line_annotations
        if start_line + 1 <= annotation.line <= end_line + 1
    ]
    if not in_range:
        return ""

    listing = "\n".join(f"- {line}" for line in in_range)
    return f"line annotations found:\n{listing}"


def build_priming_messages(code: str, annotations: str) -> list[ChatMessage]:
    """Synthetic exchange showing the model the original code.

    Empty when there is no selection to rewrite.
    """
    if not code:
        return []

    first_message = f"""```
{code}
```

{annotations}"""

    indentation = common_leading_space_count(code)
    second_message = f"""I will update the code you just provided.
It looks like every line has an indentation of {indentation} spaces, I will keep that.

What is your requirement?"""

    return [
        ChatMessage(role=ChatRole.USER, content=first_message),
        ChatMessage(role=ChatRole.ASSISTANT, content=second_message),
    ]
