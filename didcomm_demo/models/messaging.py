"""Value types exchanged with the messaging client."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class DIDCommMessage:
    """A plaintext DIDComm message."""

    id: str
    type: str
    body: dict
    to: list[str] = field(default_factory=list)
    from_: str | None = None
    created_time: int | None = None
    expires_time: int | None = None
    thid: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """JSON form, omitting unset optional headers."""
        data: dict[str, Any] = {
            "id": self.id,
            "typ": "application/didcomm-plain+json",
            "type": self.type,
            "body": self.body,
        }
        if self.to:
            data["to"] = list(self.to)
        if self.from_ is not None:
            data["from"] = self.from_
        if self.thid is not None:
            data["thid"] = self.thid
        if self.created_time is not None:
            data["created_time"] = self.created_time
        if self.expires_time is not None:
            data["expires_time"] = self.expires_time
        return data


@dataclass(frozen=True)
class SendAck:
    """Mediator acknowledgement for a dispatched message."""

    message_id: str
    stored: bool = True
    detail: str = ""


@dataclass(frozen=True)
class PingAck:
    """Identifiers of a sent trust-ping."""

    message_id: str
    message_hash: str


@dataclass(frozen=True)
class StoredMessage:
    """A message held by the mediator for a recipient."""

    msg_id: str
    msg: str
