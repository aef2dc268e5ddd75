"""
Snapshot Stream - Turn answer fragments into (code, description) snapshots
"""

from __future__ import annotations

from typing import AsyncIterator

from models.prompt_to_code import ExtractionSnapshot
from services.code_extractor import extract_code_and_description


def snapshot_for(content: str) -> ExtractionSnapshot:
    """Snapshot of the answer received so far.

    Until a code block is recognized the raw text is reported as code, so
    the caller always sees the freshest answer.
    """
    snapshot = extract_code_and_description(content)
    if content and not snapshot.code:
        return ExtractionSnapshot(code=content)
    return snapshot


async def stream_snapshots(fragments: AsyncIterator[str]) -> AsyncIterator[ExtractionSnapshot]:
    """Yield one snapshot per fragment, re-derived from the whole answer.

    Ends when `fragments` ends (completion or stop); errors from `fragments`
    propagate after the snapshots already yielded.
    """
    content = ""
    async for fragment in fragments:
        content += fragment
        yield snapshot_for(content)
