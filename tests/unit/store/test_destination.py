"""Unit tests for the destination committer."""

from __future__ import annotations

import codecs

import pytest

from core.errors import CharsetError
from core.types import OutputRecord, ToFile, ToJSON
from store.destination import commit_text


def test_commit_text_to_json_creates_nested_fields() -> None:
    """Field destinations should create intermediate containers."""
    output = OutputRecord(json={"keep": 1})

    commit_text("value", ToJSON(path="a.b[1]"), output)

    assert output.json == {"keep": 1, "a": {"b": [None, "value"]}}


def test_commit_text_to_file_encodes_with_bom() -> None:
    """File destinations should encode the text and build an attachment."""
    output = OutputRecord()
    destination = ToFile(
        binary_key="out", encode_charset="utf-16le", add_bom=True, file_name="out.txt"
    )

    commit_text("hi", destination, output)
    attachment = output.binary["out"]

    assert attachment.data == codecs.BOM_UTF16_LE + "hi".encode("utf-16-le")
    assert (attachment.file_name, attachment.file_extension, attachment.file_size) == (
        "out.txt",
        "txt",
        6,
    )


def test_commit_text_to_file_uses_default_mime_type() -> None:
    """An empty destination MIME type should use the configured default."""
    output = OutputRecord()

    commit_text("x", ToFile(mime_type=""), output, default_mime_type="text/markdown")

    assert output.binary["data"].mime_type == "text/markdown"


def test_commit_text_to_file_raises_for_unencodable_text() -> None:
    """Text that the charset cannot represent should fail."""
    with pytest.raises(CharsetError):
        commit_text("€", ToFile(encode_charset="ascii"), OutputRecord())
