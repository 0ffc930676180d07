"""Invocation data models: events, handler log records and responses."""

import base64
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

TEXT_CONTENT_TYPE = "text/plain"
JSON_CONTENT_TYPE = "application/json"
DEFAULT_STATUS_CODE = 200


class HandlerLogLevel(StrEnum):
    """Levels available to handler code."""

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"

    @property
    def severity(self) -> int:
        """Numeric severity, higher is more severe."""
        return _SEVERITIES[self]

    @classmethod
    def parse(cls, value: "str | HandlerLogLevel") -> "HandlerLogLevel":
        """Parse a level name, accepting ``warning`` and any casing.

        Raises:
            ValueError: If the name is not a known level.
        """
        if isinstance(value, HandlerLogLevel):
            return value
        name = str(value).strip().lower()
        return cls(_LEVEL_ALIASES.get(name, name))


_SEVERITIES: dict[HandlerLogLevel, int] = {
    HandlerLogLevel.DEBUG: 10,
    HandlerLogLevel.INFO: 20,
    HandlerLogLevel.WARN: 30,
    HandlerLogLevel.ERROR: 40,
}

_LEVEL_ALIASES = {"warning": "warn"}


class TriggerInfo(BaseModel):
    """Trigger that produced an event."""

    model_config = ConfigDict(frozen=True)

    kind: str = Field(default="")
    name: str = Field(default="")


class Event(BaseModel):
    """One inbound request, immutable for the life of an invocation."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    method: str = Field(default="")
    path: str = Field(default="")
    url: str = Field(default="")
    headers: dict[str, str] = Field(default_factory=dict)
    fields: dict[str, str] = Field(default_factory=dict)
    body: bytes = Field(default=b"")
    content_type: str = Field(default="")
    trigger: TriggerInfo = Field(default_factory=TriggerInfo)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def get_header(self, name: str, default: str | None = None) -> str | None:
        """Look up a header ignoring case."""
        wanted = name.casefold()
        for key, value in self.headers.items():
            if key.casefold() == wanted:
                return value
        return default

    @property
    def text(self) -> str:
        """Body decoded as UTF-8, undecodable bytes replaced."""
        return self.body.decode("utf-8", errors="replace")


class LogRecord(BaseModel):
    """A log line emitted by handler code through its context.

    Attributes are opaque: they may nest and are never validated here.
    """

    model_config = ConfigDict(frozen=True)

    level: HandlerLogLevel
    message: str
    attributes: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


@dataclass
class Response:
    """Full response descriptor a handler may return or deliver.

    Every field is optional; unset fields take the normalizer's defaults.
    """

    body: Any = None
    headers: dict[str, Any] | None = None
    content_type: str | None = None
    status_code: int | None = None


class CanonicalResponse(BaseModel):
    """The single response shape handed to the host transport."""

    model_config = ConfigDict(frozen=True)

    status_code: int = Field(default=DEFAULT_STATUS_CODE, ge=100, le=599)
    headers: dict[str, str] = Field(default_factory=dict)
    content_type: str = Field(default=TEXT_CONTENT_TYPE)
    body: bytes = Field(default=b"")

    @property
    def text(self) -> str:
        """Body decoded as UTF-8, undecodable bytes replaced."""
        return self.body.decode("utf-8", errors="replace")

    def to_wire(self) -> dict[str, Any]:
        """Encode as the processor's response message.

        UTF-8 bodies travel as text, anything else as base64.

        Returns:
            JSON-serializable response dictionary.
        """
        try:
            body = self.body.decode("utf-8")
            body_encoding = "text"
        except UnicodeDecodeError:
            body = base64.b64encode(self.body).decode("ascii")
            body_encoding = "base64"

        return {
            "status_code": self.status_code,
            "content_type": self.content_type,
            "headers": dict(self.headers),
            "body": body,
            "body_encoding": body_encoding,
        }
