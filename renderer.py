"""Compose parsed proposals into HTML pages."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping

import markdown
from jinja2 import Environment, FileSystemLoader, select_autoescape

from eip_fetcher import NOT_FOUND_MARKER, fetch_proposal
from front_matter import parse_document
from identifiers import extract_proposal_number
from lookup_table import load_lookup_table
from models import (
    ParsedMetadata,
    ProposalDocument,
    ProposalLookupEntry,
    RenderedPage,
    RequiredLink,
    registry_label,
)

LOGGER = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
SITE_TITLE = "EIP.tools"
_MARKDOWN_EXTENSIONS = ["tables", "fenced_code", "sane_lists"]


def get_environment() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=select_autoescape(["html", "xml"]),
    )


def build_page(
    document: ProposalDocument,
    metadata: ParsedMetadata,
    body: str,
    lookup: Mapping[int, ProposalLookupEntry],
) -> RenderedPage:
    """Derive the display view of one proposal."""
    label = registry_label(document.is_erc)
    not_found = body.strip() == NOT_FOUND_MARKER

    return RenderedPage(
        number=document.number,
        is_erc=document.is_erc,
        heading=f"{label}-{document.number}: {metadata.title}",
        description=metadata.description,
        authors=", ".join(metadata.author),
        created=metadata.created,
        discussions_to=metadata.discussions_to,
        requires=tuple(_required_link(number, lookup) for number in metadata.requires),
        body_html="" if not_found else render_markdown(body),
        not_found=not_found,
    )


def _required_link(number: int, lookup: Mapping[int, ProposalLookupEntry]) -> RequiredLink:
    entry = lookup.get(number)
    if entry is None:
        LOGGER.debug("Required proposal %s not in lookup table, labelling as EIP", number)
    is_erc = entry.is_erc if entry is not None else False
    return RequiredLink(
        number=number,
        label=f"{registry_label(is_erc)}-{number}",
        href=f"/eip/{number}",
    )


def render_markdown(body: str) -> str:
    return markdown.markdown(body, extensions=_MARKDOWN_EXTENSIONS)


def render_page_html(page: RenderedPage) -> str:
    template = get_environment().get_template("eip.html")
    return template.render(
        page=page,
        site_title=SITE_TITLE,
        not_found_text=NOT_FOUND_MARKER,
    )


def render_proposal(
    eip_or_no: str,
    lookup: Mapping[int, ProposalLookupEntry] | None = None,
) -> str:
    """Fetch, parse and render the proposal referenced by ``eip_or_no``.

    Raises MalformedIdentifierError, DocumentFetchError or MetadataParseError;
    a proposal missing from both registries still renders, as a placeholder.
    """
    if lookup is None:
        lookup = load_lookup_table()

    number = extract_proposal_number(eip_or_no)
    document = fetch_proposal(number, lookup=lookup)
    metadata, body = parse_document(document.text)
    page = build_page(document, metadata, body, lookup)
    LOGGER.info(
        "Rendered proposal %s (registry=%s, found=%s)",
        number,
        "erc" if document.is_erc else "eip",
        document.found,
    )
    return render_page_html(page)
