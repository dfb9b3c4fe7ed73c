"""Turn raw notification messages into plain text and a timestamp."""

import base64
import binascii
import logging
from datetime import datetime
from typing import Optional

from commtrack.domain.entities import MessageBody, NormalizedMessage, RawMessage
from commtrack.domain.errors import ValidationError
from commtrack.utils.date_parser import parse_timestamp, utc_now

logger = logging.getLogger(__name__)

PLAIN_TEXT = "text/plain"


def decode_body_data(data: str, encoding: str = "base64") -> str:
    """Decode body data into text.

    base64 data may use either the standard or the URL-safe alphabet, with or
    without padding. Undecodable bytes are replaced rather than rejected.

    Raises:
        ValidationError: If the data is not valid base64 or the encoding is unknown
    """
    if encoding == "identity":
        return data
    if encoding != "base64":
        raise ValidationError(f"Unsupported body encoding '{encoding}'")

    normalized = "".join(data.split()).replace("-", "+").replace("_", "/")
    normalized += "=" * (-len(normalized) % 4)
    try:
        raw = base64.b64decode(normalized, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError(f"Invalid base64 body data: {e}") from e
    return raw.decode("utf-8", errors="replace")


def _find_plain_text_part(parts: tuple[MessageBody, ...]) -> Optional[MessageBody]:
    """Depth-first search for the first text/plain part carrying data."""
    for part in parts:
        if part.mime_type.lower().startswith(PLAIN_TEXT) and part.data:
            return part
        nested = _find_plain_text_part(part.parts)
        if nested is not None:
            return nested
    return None


def extract_body_text(body: MessageBody) -> str:
    """Return the plain-text content of a message body, or an empty string."""
    if body.data:
        return decode_body_data(body.data, body.encoding)

    part = _find_plain_text_part(body.parts)
    if part is None or part.data is None:
        return ""
    return decode_body_data(part.data, part.encoding)


def normalize_message(message: RawMessage, now: Optional[datetime] = None) -> NormalizedMessage:
    """Normalize one raw message.

    The timestamp comes from the Date header; when it is missing or cannot be
    parsed, now (default: current time) is used instead.
    """
    timestamp = parse_timestamp(message.get_header("Date"))
    fallback = timestamp is None
    if fallback:
        logger.debug("Message %s has no usable Date header, using current time", message.id)
        timestamp = now if now is not None else utc_now()

    return NormalizedMessage(
        message_id=message.id,
        subject=message.get_header("Subject") or "",
        text=extract_body_text(message.body),
        timestamp=timestamp,
        timestamp_fallback=fallback,
    )
