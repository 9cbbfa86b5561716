"""Request and response models."""

from pydantic import BaseModel, ConfigDict, Field


class SendMessageRequest(BaseModel):
    """Request model for sending a message."""

    model_config = ConfigDict(populate_by_name=True)

    from_: str = Field(alias="from")
    to: str
    body: str


class PingRequest(BaseModel):
    """Request model for a trust-ping."""

    model_config = ConfigDict(populate_by_name=True)

    from_: str = Field(alias="from")
    to: str


class FlowResponse(BaseModel):
    """Response model for a completed flow."""

    status: str
    events_count: int
    correlation_id: str | None


class IdentityResponse(BaseModel):
    """Public identity of one participant."""

    alias: str
    did: str
    mediator_did: str | None
    key_types: list[str]


class IdentitiesResponse(BaseModel):
    """Response model for both identities."""

    alice: IdentityResponse
    bob: IdentityResponse


class StoredMessageResponse(BaseModel):
    """A message stored by the mediator."""

    msg_id: str
    msg: str


class StoredMessagesResponse(BaseModel):
    """Response model for stored messages."""

    messages: list[StoredMessageResponse]


class StatusResponse(BaseModel):
    """Response model for status."""

    status: str
