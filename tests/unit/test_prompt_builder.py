"""Tests for prompt construction."""

from models.prompt_to_code import (
    ChatRole,
    EditorContent,
    EditorInformation,
    LineAnnotation,
)
from services.prompt_builder import (
    build_priming_messages,
    build_rule,
    build_system_prompt,
    description_language_clause,
    extract_annotations,
    file_name,
    is_text_language,
)


class TestRule:
    """Tests for build_rule."""

    def test_code_with_selection_and_description(self) -> None:
        """Test the rewrite rules with a description step."""
        rule = build_rule("swift", "let x = 1", True)

        assert rule.splitlines() == [
            "1. Do what I required.",
            "2. Format the updated code to use the original indentation. Especially the first line.",
            "3. Embed the updated code in a markdown code block.",
            "4. After the code block, write a clear and concise description "
            "in 1-3 sentences about what you did in step 1.",
            "5. Reply with the result.",
        ]

    def test_code_without_selection_or_description(self) -> None:
        """Test the write-new-code rules without a description step."""
        rule = build_rule("swift", "", False)

        assert rule.splitlines() == [
            "1. Write the code that meets my requirements.",
            "2. Embed the code in a markdown code block.",
            "3. Reply with the result.",
        ]

    def test_text_with_selection_forbids_translation(self) -> None:
        """Test markdown rewrites keep the content language."""
        rule = build_rule("markdown", "# Title", False)

        assert "4. You MUST never translate the content" in rule
        assert rule.splitlines()[-1] == "5. Reply with the result."

    def test_text_without_selection(self) -> None:
        """Test plain text writing rules."""
        rule = build_rule("plaintext", "", True)

        assert rule.startswith("1. Write the content that meets my requirements.")
        assert rule.splitlines()[-1] == "4. Reply with the result."

    def test_description_language(self) -> None:
        """Test the preferred language clause ends the description step."""
        rule = build_rule("swift", "x", True, " in French")

        assert "what you did in step 1 in French." in rule


class TestDescriptionLanguageClause:
    """Tests for description_language_clause."""

    def test_enabled_with_language(self) -> None:
        config = {
            "chatLanguage": "Japanese",
            "promptToCode": {"generateDescriptionInUserPreferredLanguage": True},
        }
        assert description_language_clause(config) == " in Japanese"

    def test_disabled(self) -> None:
        config = {
            "chatLanguage": "Japanese",
            "promptToCode": {"generateDescriptionInUserPreferredLanguage": False},
        }
        assert description_language_clause(config) == ""

    def test_no_language(self) -> None:
        config = {"promptToCode": {"generateDescriptionInUserPreferredLanguage": True}}
        assert description_language_clause(config) == ""


class TestSystemPrompt:
    """Tests for build_system_prompt."""

    def test_programming_language(self) -> None:
        """Test the role, file name and extra prompt are included."""
        editor = EditorInformation(
            document_url="file:///Users/dev/My%20Project/main.swift",
            language="swift",
        )

        prompt = build_system_prompt(editor, "Prefer structs.", "1. Reply with the result.")

        assert prompt == (
            "You are a senior programmer in writing in swift.\n"
            "The active file is: main.swift.\n"
            "Prefer structs.\n"
            "\n"
            "1. Reply with the result."
        )

    def test_text_language(self) -> None:
        editor = EditorInformation(document_url="/tmp/README.md", language="markdown")

        prompt = build_system_prompt(editor, None, "rules")

        assert prompt.startswith("You are good at writing in markdown.\n")
        assert "The active file is: README.md." in prompt

    def test_file_name(self) -> None:
        assert file_name("file:///a/b/c.py") == "c.py"
        assert file_name("/a/b/c.py") == "c.py"
        assert file_name("C:\\proj\\A.swift") == "A.swift"
        assert file_name("Sources/A.swift") == "A.swift"
        assert is_text_language("Markdown")
        assert not is_text_language("python")


class TestAnnotations:
    """Tests for extract_annotations."""

    def test_only_annotations_in_range(self, source) -> None:
        """Test annotations are filtered and numbered relative to the selection."""
        editor = EditorInformation(
            editor_content=EditorContent(
                line_annotations=[
                    LineAnnotation(type="error", line=1, message="outside before"),
                    LineAnnotation(type="warning", line=2, message="unused a"),
                    LineAnnotation(type="error", line=3, message="bad b"),
                    LineAnnotation(type="error", line=4, message="outside after"),
                ]
            ),
            document_url=source.document_url,
            language="swift",
        )

        assert extract_annotations(editor, source) == (
            "line annotations found:\n"
            "- line 1: warning unused a\n"
            "- line 2: error bad b"
        )

    def test_no_annotations(self, source) -> None:
        editor = EditorInformation.from_source(source, "let a = 1")

        assert extract_annotations(editor, source) == ""


class TestPrimingMessages:
    """Tests for build_priming_messages."""

    def test_empty_selection(self) -> None:
        """Test nothing is primed without a selection."""
        assert build_priming_messages("", "") == []

    def test_code_and_indentation(self) -> None:
        """Test the code echo and the indentation acknowledgment."""
        messages = build_priming_messages("    let a = 1\n    let b = 2", "line annotations found:")

        assert [m.role for m in messages] == [ChatRole.USER, ChatRole.ASSISTANT]
        assert messages[0].content == (
            "```\n    let a = 1\n    let b = 2\n```\n\nline annotations found:"
        )
        assert "an indentation of 4 spaces" in messages[1].content
        assert messages[1].content.endswith("What is your requirement?")
