import pytest

from front_matter import MetadataParseError, parse_document, parse_metadata, split_front_matter
from models import ParsedMetadata

SAMPLE_DOC = """---
eip: 1559
title: Fee market change for ETH 1.0 chain
description: A transaction pricing mechanism with a burned base fee.
author: Vitalik Buterin (@vbuterin), Eric Conner (@econoar), Rick Dudley (@AFDudley)
discussions-to: https://ethereum-magicians.org/t/eip-1559-fee-market-change-for-eth-1-0-chain/2783
status: Final
type: Standards Track
category: Core
created: 2019-04-13
requires: 2718, 2930
---

## Simple Summary
A transaction pricing mechanism.
"""


def test_parse_document_splits_metadata_and_body() -> None:
    metadata, body = parse_document(SAMPLE_DOC)

    assert metadata.eip == 1559
    assert metadata.title == "Fee market change for ETH 1.0 chain"
    assert metadata.description == "A transaction pricing mechanism with a burned base fee."
    assert metadata.author == (
        "Vitalik Buterin (@vbuterin)",
        "Eric Conner (@econoar)",
        "Rick Dudley (@AFDudley)",
    )
    assert metadata.discussions_to.startswith("https://ethereum-magicians.org/")
    assert metadata.status == "Final"
    assert metadata.type == "Standards Track"
    assert metadata.category == "Core"
    assert metadata.created == "2019-04-13"
    assert metadata.requires == (2718, 2930)
    assert body.startswith("\n## Simple Summary")


def test_eip_field_is_coerced_to_int() -> None:
    metadata = parse_metadata("eip: 1234")
    assert metadata.eip == 1234
    assert isinstance(metadata.eip, int)


@pytest.mark.parametrize("value", ["1,2,3", "1, 2, 3", " 1 ,2 ,  3 "])
def test_requires_ignores_whitespace_around_commas(value: str) -> None:
    assert parse_metadata(f"requires: {value}").requires == (1, 2, 3)


@pytest.mark.parametrize("text", [
    "",
    "Just a body without front matter.",
    "# Title\n\n---\nnot: front matter\n---\n",
    "---\ntitle: never closed\n",
])
def test_missing_front_matter_returns_whole_text_as_body(text: str) -> None:
    metadata, body = parse_document(text)
    assert metadata == ParsedMetadata()
    assert body == text


def test_split_front_matter_handles_crlf() -> None:
    block, body = split_front_matter("---\r\ntitle: Windows\r\n---\r\nBody\r\n")
    assert block == "title: Windows"
    assert body == "Body\n"


def test_split_front_matter_without_body() -> None:
    block, body = split_front_matter("---\ntitle: Only metadata\n---")
    assert block == "title: Only metadata"
    assert body == ""


def test_lines_without_key_value_are_skipped() -> None:
    metadata = parse_metadata("no separator here\ntitle:\nstatus: \n: orphan\ntitle: Kept")
    assert metadata.title == "Kept"
    assert metadata.status == ""


def test_value_is_split_on_first_colon_space_only() -> None:
    metadata = parse_metadata("title: ERC-20: Token Standard")
    assert metadata.title == "ERC-20: Token Standard"


def test_keys_are_case_sensitive_and_unknown_keys_kept_in_extra() -> None:
    metadata = parse_metadata("Title: Upper\nlast-call-deadline: 2024-01-01")
    assert metadata.title == ""
    assert metadata.extra == {"Title": "Upper", "last-call-deadline": "2024-01-01"}


def test_invalid_eip_value_raises() -> None:
    with pytest.raises(MetadataParseError) as excinfo:
        parse_metadata("eip: twelve")
    assert excinfo.value.field == "eip"


def test_invalid_requires_item_raises() -> None:
    with pytest.raises(MetadataParseError) as excinfo:
        parse_metadata("requires: 20, abc")
    assert excinfo.value.field == "requires"
    assert excinfo.value.value == "abc"


def test_extra_keys_are_read_only() -> None:
    metadata = parse_metadata("last-call-deadline: 2024-01-01")

    with pytest.raises(TypeError):
        metadata.extra["status"] = "Final"  # type: ignore[index]
    assert ParsedMetadata().extra == {}
