"""
Indentation helpers for code selections
"""

from __future__ import annotations


def common_leading_space_count(code: str) -> int:
    """Smallest number of leading spaces shared by every non-empty line.

    Only spaces count as indentation; a tab ends the prefix.
    """
    lines = [line for line in code.split("\n") if line]
    if not lines:
        return 0

    common = None
    for line in lines:
        count = len(line) - len(line.lstrip(" "))
        common = count if common is None else min(common, count)
        if common == 0:
            break
    return common
