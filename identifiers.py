"""Normalize user-supplied proposal references into numbers."""

from __future__ import annotations

import re

_DIGITS_RE = re.compile(r"[0-9]+")


class MalformedIdentifierError(ValueError):
    """Raised when a proposal reference contains no positive number."""


def extract_proposal_number(raw: str) -> int:
    """Return the proposal number embedded in ``raw``.

    Accepts the forms used in links and file names, e.g. ``"1234"``,
    ``"eip-1234"``, ``"erc-1234.md"``. The first run of digits wins; whether
    the proposal exists is not checked here. Zero is rejected.
    """
    match = _DIGITS_RE.search(raw or "")
    if match is None:
        raise MalformedIdentifierError(f"No proposal number in {raw!r}")
    number = int(match.group())
    if number == 0:
        raise MalformedIdentifierError(f"Proposal numbers start at 1, got {raw!r}")
    return number
