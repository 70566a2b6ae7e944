"""Status transition errors for the moderation hook.

Status may only move pending -> verified (automatic) or pending -> rejected
(external moderation). Anything else is refused with this error.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from talentproof.domain.exceptions import TalentProofError

if TYPE_CHECKING:
    from talentproof.domain.models.video_record import VerificationStatus


class InvalidStatusTransitionError(TalentProofError):
    """Raised when a status change is not allowed from the current status.

    HTTP Status: 409 Conflict

    Attributes:
        video_id: The video whose status change was refused.
        from_status: The current status.
        to_status: The requested status.
    """

    def __init__(
        self,
        video_id: str,
        from_status: VerificationStatus,
        to_status: VerificationStatus,
    ) -> None:
        self.video_id = video_id
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Video {video_id} cannot move from {from_status.value} "
            f"to {to_status.value}"
        )

    def to_rfc7807_dict(self) -> dict[str, Any]:
        return {
            "type": "urn:talentproof:video:invalid-status-transition",
            "title": "Invalid Status Transition",
            "status": 409,
            "detail": str(self),
            "video_id": self.video_id,
            "from_status": self.from_status.value,
            "to_status": self.to_status.value,
        }
