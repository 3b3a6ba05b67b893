"""Substring search over buffer storage."""

from __future__ import annotations

NOT_FOUND = -1


def find(haystack: bytes | bytearray, needle: bytes, start: int = 0, end: int | None = None) -> int:
    """
    Locate ``needle`` inside ``haystack[start:end]``.

    Returns the absolute offset of the first match, or ``NOT_FOUND``.

    - An empty needle matches at ``start``.
    - A single-byte needle is a direct byte scan.
    - A longer needle scans for its first byte and then verifies the rest
      in place; on mismatch the scan resumes one byte after the candidate.
    """
    if end is None:
        end = len(haystack)

    needle_len = len(needle)
    if needle_len == 0:
        return start
    if needle_len > end - start:
        return NOT_FOUND

    first = needle[0]
    if needle_len == 1:
        return haystack.find(first, start, end)

    rest = needle[1:]
    last_start = end - needle_len
    pos = start
    while pos <= last_start:
        pos = haystack.find(first, pos, last_start + 1)
        if pos == NOT_FOUND:
            break
        if haystack[pos + 1 : pos + needle_len] == rest:
            return pos
        pos += 1
    return NOT_FOUND


def starts_with(haystack: bytes | bytearray, length: int, prefix: bytes) -> bool:
    """True when the first ``len(prefix)`` bytes equal ``prefix``."""
    n = len(prefix)
    if length < n:
        return False
    return haystack[:n] == prefix


def ends_with(haystack: bytes | bytearray, length: int, suffix: bytes) -> bool:
    """True when the ``len(suffix)`` bytes ending at ``length`` equal ``suffix``."""
    n = len(suffix)
    if length < n:
        return False
    return haystack[length - n : length] == suffix
