"""Live packet streaming."""

from .live_stream import KEEPALIVE_COMMENT, PACKET_EVENT, LiveStream

__all__ = ["KEEPALIVE_COMMENT", "PACKET_EVENT", "LiveStream"]
