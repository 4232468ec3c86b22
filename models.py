"""Shared typed models for the proposal site."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

RAW_BASE_URL = "https://raw.githubusercontent.com"


@dataclass(frozen=True, slots=True)
class Registry:
    """One of the two GitHub repositories proposals are published in."""

    name: str
    label: str
    owner: str
    repo: str
    directory: str
    file_prefix: str
    branch: str = "master"

    def file_name(self, number: int) -> str:
        return f"{self.file_prefix}-{number}.md"

    def raw_url(self, number: int) -> str:
        return (
            f"{RAW_BASE_URL}/{self.owner}/{self.repo}/{self.branch}/"
            f"{self.directory}/{self.file_name(number)}"
        )


# Registry A is tried first when a number is missing from the lookup table:
# most new proposals land in the ERC repository.
ERC_REGISTRY = Registry(
    name="erc",
    label="ERC",
    owner="ethereum",
    repo="ERCs",
    directory="ERCS",
    file_prefix="erc",
)
EIP_REGISTRY = Registry(
    name="eip",
    label="EIP",
    owner="ethereum",
    repo="EIPs",
    directory="EIPS",
    file_prefix="eip",
)


def registry_label(is_erc: bool) -> str:
    return ERC_REGISTRY.label if is_erc else EIP_REGISTRY.label


@dataclass(frozen=True, slots=True)
class ProposalLookupEntry:
    """Precomputed location of a known proposal."""

    number: int
    is_erc: bool
    markdown_path: str


@dataclass(frozen=True, slots=True)
class ProposalDocument:
    """Raw markdown fetched for one proposal.

    ``found`` is False when neither registry had the file; ``text`` then holds
    the upstream not-found marker.
    """

    number: int
    text: str
    is_erc: bool
    found: bool = True
    source_url: str = ""


@dataclass(frozen=True, slots=True)
class ParsedMetadata:
    """Typed front matter of a proposal. Missing fields stay empty."""

    eip: int | None = None
    title: str = ""
    description: str = ""
    author: tuple[str, ...] = ()
    discussions_to: str = ""
    status: str = ""
    type: str = ""
    category: str = ""
    created: str = ""
    requires: tuple[int, ...] = ()
    extra: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True, slots=True)
class RequiredLink:
    number: int
    label: str
    href: str


@dataclass(frozen=True, slots=True)
class RenderedPage:
    """Display view of one proposal, recomputed on every request."""

    number: int
    is_erc: bool
    heading: str
    description: str
    authors: str
    created: str
    discussions_to: str
    requires: tuple[RequiredLink, ...]
    body_html: str
    not_found: bool
