"""Duplicate Remover — drop repeated lines from pasted lists (SKUs, emails, keywords).

Invariants:
    - First occurrence wins; output keeps the original text of that line
    - unique_count + removed_count == original_count
    - Blank or whitespace-only input yields an empty result with zero counts
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class DuplicateRemovalResult:
    result: str
    original_count: int
    unique_count: int
    removed_count: int


EMPTY_RESULT = DuplicateRemovalResult(result="", original_count=0, unique_count=0, removed_count=0)


def _comparison_key(line: str, case_sensitive: bool, trim_whitespace: bool) -> str:
    key = line.strip() if trim_whitespace else line
    return key if case_sensitive else key.lower()


def remove_duplicates(
    text: str, case_sensitive: bool = True, trim_whitespace: bool = False,
) -> DuplicateRemovalResult:
    if not text or not text.strip():
        return EMPTY_RESULT

    lines = text.split("\n")
    seen: set[str] = set()
    kept: list[str] = []
    for line in lines:
        key = _comparison_key(line, case_sensitive, trim_whitespace)
        if key in seen:
            continue
        seen.add(key)
        kept.append(line)

    return DuplicateRemovalResult(
        result="\n".join(kept),
        original_count=len(lines),
        unique_count=len(kept),
        removed_count=len(lines) - len(kept),
    )
