"""Messaging: in-process delivery of committed catalog events."""

from app.infrastructure.messaging.event_channel import InProcessEventChannel

__all__ = ["InProcessEventChannel"]
