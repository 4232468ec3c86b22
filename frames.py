"""Farcaster frame responses and the landing page that advertises them."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from lookup_table import load_lookup_table
from models import ProposalLookupEntry, registry_label
from renderer import SITE_TITLE, get_environment

LOGGER = logging.getLogger(__name__)

SITE_DESCRIPTION = "Explore all EIPs & ERCs easily!"
FRAME_POST_PATH = "/api/frame/home"
INPUT_PLACEHOLDER = "Enter EIP/ERC No"
# Leading integer of the input, ASCII digits only.
_LEADING_INT_RE = re.compile(r"\s*([+-]?[0-9]+)")


class UntrustedData(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    input_text: str | None = Field(default=None, alias="inputText")


class FramePayload(BaseModel):
    """Body of a frame action post; only the typed input is used."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    untrusted_data: UntrustedData = Field(default_factory=UntrustedData, alias="untrustedData")


@dataclass(frozen=True, slots=True)
class FrameButton:
    label: str
    action: str = ""
    target: str = ""


@dataclass(frozen=True, slots=True)
class Frame:
    image_url: str
    post_url: str
    buttons: tuple[FrameButton, ...]
    input_placeholder: str = INPUT_PLACEHOLDER


def get_host() -> str:
    """Absolute base URL of the site, from the HOST environment variable."""
    return os.getenv("HOST", "")


def build_frame_response(
    payload: Any,
    host: str | None = None,
    lookup: Mapping[int, ProposalLookupEntry] | None = None,
    now: datetime | None = None,
) -> str:
    """Return the frame HTML answering one frame action post.

    A known proposal number in ``inputText`` yields a frame linking to that
    proposal. Everything else, including errors while composing it, yields the
    default search frame.
    """
    host = get_host() if host is None else host

    try:
        frame = _proposal_frame(payload, host, lookup)
    except Exception:  # the frame host must always receive a valid frame
        LOGGER.exception("Frame composition failed, returning the default frame")
        frame = None

    if frame is None:
        frame = search_frame(host, now=now, button_label="Search ⚡")
    return render_frame_html(frame)


def _proposal_frame(
    payload: Any,
    host: str,
    lookup: Mapping[int, ProposalLookupEntry] | None,
) -> Frame | None:
    try:
        data = FramePayload.model_validate(payload)
    except ValidationError as exc:
        LOGGER.info("Ignoring malformed frame payload: %s", exc.errors(include_url=False))
        return None

    input_text = (data.untrusted_data.input_text or "").strip()
    if not input_text:
        return None

    match = _LEADING_INT_RE.match(input_text)
    if match is None:
        LOGGER.info("Frame input %r is not a number", input_text)
        return None
    number = int(match.group(1))

    if lookup is None:
        lookup = load_lookup_table()
    entry = lookup.get(number)
    if entry is None:
        LOGGER.info("Frame input %s is not a known proposal", number)
        return None

    return Frame(
        image_url=f"{host}/api/og?eipNo={number}",
        post_url=f"{host}{FRAME_POST_PATH}",
        buttons=(
            FrameButton(label="Search 🔎"),
            FrameButton(
                label=f"📙 {registry_label(entry.is_erc)}-{number}",
                action="link",
                target=f"{host}/eip/{number}",
            ),
        ),
    )


def search_frame(host: str, now: datetime | None = None, button_label: str = "Search 🔎") -> Frame:
    """Default frame; the image URL carries a millisecond timestamp for cache busting."""
    now = now or datetime.now(UTC)
    return Frame(
        image_url=f"{host}/og/index.png?date={int(now.timestamp() * 1000)}",
        post_url=f"{host}{FRAME_POST_PATH}",
        buttons=(FrameButton(label=button_label),),
    )


def render_frame_html(frame: Frame, show_body: bool = False) -> str:
    template = get_environment().get_template("frame.html")
    return template.render(
        frame=frame,
        site_title=SITE_TITLE,
        site_description=SITE_DESCRIPTION,
        show_body=show_body,
    )


def render_home_html(host: str | None = None, now: datetime | None = None) -> str:
    """Landing page carrying the default frame meta tags."""
    host = get_host() if host is None else host
    return render_frame_html(search_frame(host, now=now), show_body=True)
