"""Locate and fetch proposal markdown from the EIP and ERC registries."""

from __future__ import annotations

import logging
import os
from typing import Mapping

import requests

from lookup_table import load_lookup_table
from models import EIP_REGISTRY, ERC_REGISTRY, ProposalDocument, ProposalLookupEntry

# raw.githubusercontent.com answers missing files with this exact body.
NOT_FOUND_MARKER = "404: Not Found"
_DEFAULT_TIMEOUT_SECONDS = 15.0

LOGGER = logging.getLogger(__name__)


class DocumentFetchError(RuntimeError):
    """Raised when a known proposal's source could not be fetched."""


def fetch_timeout() -> float:
    return float(os.getenv("EIP_FETCH_TIMEOUT_SECONDS", _DEFAULT_TIMEOUT_SECONDS))


def fetch_proposal(
    number: int,
    lookup: Mapping[int, ProposalLookupEntry] | None = None,
) -> ProposalDocument:
    """Fetch the markdown for proposal ``number``.

    Known numbers are fetched straight from their recorded path. Unknown ones
    are probed in the ERC registry first and then, once, in the EIP registry.
    A proposal missing from both comes back with ``found=False``.
    """
    if lookup is None:
        lookup = load_lookup_table()

    entry = lookup.get(number)
    if entry is not None:
        return _fetch_known(entry)

    LOGGER.info("Proposal %s not in lookup table, probing registries", number)
    erc_url = ERC_REGISTRY.raw_url(number)
    text = _probe(erc_url)
    if text is not None:
        return ProposalDocument(number=number, text=text, is_erc=True, source_url=erc_url)

    eip_url = EIP_REGISTRY.raw_url(number)
    text = _probe(eip_url)
    if text is not None:
        return ProposalDocument(number=number, text=text, is_erc=False, source_url=eip_url)

    LOGGER.info("Proposal %s not found in either registry", number)
    return ProposalDocument(
        number=number,
        text=NOT_FOUND_MARKER,
        is_erc=False,
        found=False,
    )


def _fetch_known(entry: ProposalLookupEntry) -> ProposalDocument:
    try:
        response = requests.get(entry.markdown_path, timeout=fetch_timeout())
    except requests.RequestException as exc:
        raise DocumentFetchError(
            f"Failed to fetch proposal {entry.number} from {entry.markdown_path}: {exc}"
        ) from exc

    found = not is_not_found(response)
    if not found:
        LOGGER.warning(
            "Lookup entry for proposal %s points at a missing file: %s",
            entry.number,
            entry.markdown_path,
        )
    return ProposalDocument(
        number=entry.number,
        text=response.text if found else NOT_FOUND_MARKER,
        is_erc=entry.is_erc,
        found=found,
        source_url=entry.markdown_path,
    )


def _probe(url: str) -> str | None:
    """Return the body at ``url`` or None when the registry lacks the file."""
    try:
        response = requests.get(url, timeout=fetch_timeout())
    except requests.RequestException as exc:
        LOGGER.warning("Registry probe failed for %s: %s", url, exc)
        return None

    if is_not_found(response):
        LOGGER.debug("Registry probe miss: %s", url)
        return None
    return response.text


def is_not_found(response: requests.Response) -> bool:
    # The status alone is not reliable; the body has to be checked too.
    return response.status_code == 404 or response.text.strip() == NOT_FOUND_MARKER
