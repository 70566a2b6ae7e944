"""Deadline expiry handler protocol.

The verification engine stores a deadline but never enforces it. When an
external scheduler reports that a pending video's deadline has passed, the
engine forwards the record to this handler (for example a moderation queue
or an owner notification). The handler decides what happens next.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol

from talentproof.domain.models.video_record import VideoRecord


class DeadlineExpiryHandlerProtocol(Protocol):
    """Receives pending videos whose verification deadline passed."""

    @abstractmethod
    async def on_verification_deadline_expired(self, record: VideoRecord) -> None:
        """Handle a pending record past its deadline.

        Args:
            record: The record as loaded when the expiry was detected.
        """
        ...
