"""
Code Extractor - Derive (code, description) from a markdown answer
"""

from __future__ import annotations

import re

from models.prompt_to_code import ExtractionSnapshot

# ```lang\n<code>\n```
CLOSED_CODE_BLOCK = re.compile(r"```(?:\w+)?\n(.+?)\n```", re.DOTALL)
# ```lang\n<code so far>, no closing fence yet
OPEN_CODE_BLOCK = re.compile(r"```(?:\w+)?\n(.+?)\Z", re.DOTALL)


def _find_code_block(markdown: str) -> tuple[str, int] | None:
    """Return the first code block and the offset where it ends"""
    match = CLOSED_CODE_BLOCK.search(markdown)
    if match is None:
        match = OPEN_CODE_BLOCK.search(markdown)
    if match is None:
        return None
    return match.group(1), match.end()


def extract_code_and_description(content: str) -> ExtractionSnapshot:
    """Extract the first code block and the text following it.

    Safe to call on any prefix of a streamed answer: while the fence is still
    open the code is everything received after it and the description is
    empty. Text before the first fence is ignored, as are any further blocks.
    """
    found = _find_code_block(content)
    if found is None:
        return ExtractionSnapshot()

    code, end_index = found
    description = content[end_index:].strip()
    return ExtractionSnapshot(code=code, description=description)
