"""Message sources feeding the ingestion pipeline."""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable

from commtrack.database.mappers import raw_message_from_dict
from commtrack.domain.entities import RawMessage
from commtrack.domain.errors import TransportError

# Mailbox search used to find referral notifications at the provider.
DEFAULT_PROVIDER_QUERY = 'from:affiliatly.com subject:"Sourhouse: New referred order"'


class MessageSource(ABC):
    """Provider-agnostic source of raw notification messages.

    Implementations should yield messages newest first. Any failure that
    makes the batch unusable (rejected credentials, network errors) must be
    raised as TransportError.
    """

    @abstractmethod
    def fetch_messages(self) -> Iterable[RawMessage]:
        """Return the raw messages of one ingestion batch."""
        pass


class JsonFileMessageSource(MessageSource):
    """Reads raw messages from a JSON export.

    The file holds either a list of messages or an object with a
    ``messages`` list.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def fetch_messages(self) -> list[RawMessage]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                payload = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise TransportError(f"Could not read messages from {self.path}: {e}") from e

        if isinstance(payload, dict):
            payload = payload.get("messages")
        if not isinstance(payload, list):
            raise TransportError(f"{self.path} does not contain a list of messages")

        try:
            return [raw_message_from_dict(item) for item in payload]
        except (KeyError, TypeError, AttributeError) as e:
            raise TransportError(f"Malformed message in {self.path}: {e}") from e
