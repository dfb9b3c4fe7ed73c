"""Tests for message normalization."""

import base64
from datetime import datetime, UTC

import pytest

from commtrack.domain.entities import MessageBody, MessageHeader, RawMessage
from commtrack.domain.errors import ValidationError
from commtrack.domain.normalizer import decode_body_data, extract_body_text, normalize_message

from conftest import encode_body, make_message

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=UTC)


def test_decode_standard_base64_with_padding():
    data = base64.b64encode("price $1,299.00".encode()).decode()
    assert decode_body_data(data) == "price $1,299.00"


def test_decode_url_safe_base64_without_padding():
    text = "Order ~~ with ID: SH1??"
    data = base64.urlsafe_b64encode(text.encode()).decode().rstrip("=")
    assert decode_body_data(data) == text


def test_decode_identity_encoding():
    assert decode_body_data("already plain", encoding="identity") == "already plain"


def test_decode_invalid_base64_raises():
    with pytest.raises(ValidationError):
        decode_body_data("!!!not base64!!!")


def test_decode_unknown_encoding_raises():
    with pytest.raises(ValidationError, match="Unsupported body encoding"):
        decode_body_data("abc", encoding="quoted-printable")


def test_extract_body_text_prefers_plain_part():
    message = make_message("m1", "SH1", "149.00", multipart=True)
    text = extract_body_text(message.body)
    assert "<p>" not in text
    assert "order with ID: SH1" in text


def test_extract_body_text_searches_nested_parts():
    body = MessageBody(
        mime_type="multipart/mixed",
        parts=(
            MessageBody(
                mime_type="multipart/alternative",
                parts=(MessageBody(mime_type="text/plain", data=encode_body("nested text")),),
            ),
        ),
    )
    assert extract_body_text(body) == "nested text"


def test_extract_body_text_html_only_is_empty():
    body = MessageBody(
        mime_type="multipart/alternative",
        parts=(MessageBody(mime_type="text/html", data=encode_body("<b>hi</b>")),),
    )
    assert extract_body_text(body) == ""


def test_normalize_uses_date_header_in_utc():
    message = RawMessage(
        id="m1",
        headers=(
            MessageHeader("date", "Tue, 05 Mar 2024 09:30:00 -0800"),
            MessageHeader("Subject", "Sourhouse: New referred order"),
        ),
        body=MessageBody(data="hello", encoding="identity"),
    )

    normalized = normalize_message(message, now=NOW)

    assert normalized.message_id == "m1"
    assert normalized.subject == "Sourhouse: New referred order"
    assert normalized.text == "hello"
    assert normalized.timestamp == datetime(2024, 3, 5, 17, 30, tzinfo=UTC)
    assert normalized.timestamp_fallback is False


def test_normalize_missing_date_falls_back_to_now():
    message = make_message("m1", "SH1", "149.00")

    normalized = normalize_message(message, now=NOW)

    assert normalized.timestamp == NOW
    assert normalized.timestamp_fallback is True


def test_normalize_garbage_date_falls_back_to_now():
    message = RawMessage(
        id="m1",
        headers=(MessageHeader("Date", "garbage-value"),),
        body=MessageBody(data="x", encoding="identity"),
    )

    normalized = normalize_message(message, now=NOW)

    assert normalized.timestamp == NOW
    assert normalized.timestamp_fallback is True
    assert normalized.subject == ""
