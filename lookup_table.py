"""Static proposal lookup table: loading at runtime and rebuilding from GitHub."""

from __future__ import annotations

import json
import logging
import os
import re
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import requests

from models import EIP_REGISTRY, ERC_REGISTRY, ProposalLookupEntry, Registry

LOGGER = logging.getLogger(__name__)

DEFAULT_LOOKUP_TABLE_PATH = Path(__file__).resolve().parent / "data" / "valid_eips.json"
GITHUB_API_URL = "https://api.github.com"
REQUEST_TIMEOUT_SECONDS = 30

_PROPOSAL_FILE_RE = re.compile(r"^(?:eip|erc)-([0-9]+)\.md$")
_NUMBER_KEY_RE = re.compile(r"[0-9]+")


def lookup_table_path() -> Path:
    """Path of the shipped table, overridable with EIP_LOOKUP_TABLE_PATH."""
    override = (os.getenv("EIP_LOOKUP_TABLE_PATH") or "").strip()
    return Path(override) if override else DEFAULT_LOOKUP_TABLE_PATH


def load_lookup_table(path: Path | str | None = None) -> Mapping[int, ProposalLookupEntry]:
    """Return the read-only lookup table, loading it once per path."""
    return _load_cached(Path(path) if path is not None else lookup_table_path())


@lru_cache(maxsize=8)
def _load_cached(path: Path) -> Mapping[int, ProposalLookupEntry]:
    if not path.exists():
        LOGGER.warning("Lookup table %s not found, every lookup will probe registries", path)
        return MappingProxyType({})

    payload = json.loads(path.read_text(encoding="utf-8"))
    entries = _parse_table_payload(payload)
    LOGGER.info("Loaded %s proposals from lookup table %s", len(entries), path)
    return MappingProxyType(entries)


def _parse_table_payload(payload: Any) -> dict[int, ProposalLookupEntry]:
    """Parse the ``{"<n>": {"isERC": bool, "markdownPath": str}}`` JSON shape."""
    if not isinstance(payload, dict):
        raise RuntimeError("Unexpected lookup table shape: expected an object")

    entries: dict[int, ProposalLookupEntry] = {}
    for key, item in payload.items():
        if not isinstance(item, dict) or not _NUMBER_KEY_RE.fullmatch(str(key)):
            continue
        markdown_path = item.get("markdownPath")
        if not isinstance(markdown_path, str) or not markdown_path:
            continue
        number = int(key)
        entries[number] = ProposalLookupEntry(
            number=number,
            is_erc=bool(item.get("isERC")),
            markdown_path=markdown_path,
        )
    return entries


def build_lookup_table() -> dict[int, ProposalLookupEntry]:
    """List both registries on GitHub and build a fresh table.

    EIP files are collected first and ERC files second, so an ERC entry
    replaces the stub a moved proposal leaves behind in the EIP repository.
    """
    entries: dict[int, ProposalLookupEntry] = {}
    for registry in (EIP_REGISTRY, ERC_REGISTRY):
        numbers = _list_registry_numbers(registry)
        for number in numbers:
            entries[number] = ProposalLookupEntry(
                number=number,
                is_erc=registry is ERC_REGISTRY,
                markdown_path=registry.raw_url(number),
            )
        LOGGER.info("Lookup build: registry=%s proposals=%s", registry.name, len(numbers))

    LOGGER.info("Lookup build: total=%s", len(entries))
    return dict(sorted(entries.items()))


def _list_registry_numbers(registry: Registry) -> list[int]:
    root = _get_json(
        f"{GITHUB_API_URL}/repos/{registry.owner}/{registry.repo}/git/trees/{registry.branch}"
    )
    directory_sha = None
    for item in root.get("tree", []):
        if item.get("path") == registry.directory and item.get("type") == "tree":
            directory_sha = item.get("sha")
            break
    if not directory_sha:
        raise RuntimeError(
            f"Directory {registry.directory!r} missing from {registry.owner}/{registry.repo}"
        )

    listing = _get_json(
        f"{GITHUB_API_URL}/repos/{registry.owner}/{registry.repo}/git/trees/{directory_sha}"
    )
    if listing.get("truncated"):
        LOGGER.warning("Lookup build: tree listing for %s was truncated", registry.name)

    numbers: list[int] = []
    for item in listing.get("tree", []):
        if item.get("type") != "blob":
            continue
        match = _PROPOSAL_FILE_RE.match(str(item.get("path", "")))
        if match:
            numbers.append(int(match.group(1)))
    return sorted(numbers)


def _get_json(url: str) -> dict[str, Any]:
    headers = {"Accept": "application/vnd.github+json"}
    token = os.getenv("GITHUB_TOKEN")
    if token:
        headers["Authorization"] = f"Bearer {token}"

    response = requests.get(url, headers=headers, timeout=REQUEST_TIMEOUT_SECONDS)
    response.raise_for_status()
    body = response.json()
    if not isinstance(body, dict):
        raise RuntimeError(f"Unexpected GitHub response shape from {url}")
    return body


def write_lookup_table(entries: Mapping[int, ProposalLookupEntry], path: Path | str) -> Path:
    """Write ``entries`` in the shipped JSON format and return the path."""
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        str(number): {"isERC": entry.is_erc, "markdownPath": entry.markdown_path}
        for number, entry in sorted(entries.items())
    }
    out_path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    LOGGER.info("Wrote %s lookup entries to %s", len(payload), out_path)
    return out_path
