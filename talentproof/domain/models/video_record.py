"""Video record domain models.

This module defines the persisted entity for a talent video and the
attestations that accumulate on it:
- VerificationStatus: pending / verified / rejected
- VerifierRelationship: how the verifier knows the athlete
- VerificationAttestation: one verifier's claim that the video is authentic
- VideoRecord: the video with its append-only attestation list
- VerificationProgress: read projection used to render "2/3 verifications"

Invariants:
- No two attestations on one record share a device fingerprint.
- No two attestations on one record share an IP address.
- verification_threshold is fixed when the record is created.
- Attestations are append-only and keep submission order.

Developer Golden Rules:
1. IMMUTABLE - Records are frozen; every write produces a new instance
2. NO NULL IDENTIFIERS - Stored attestations always carry both anti-fraud keys
3. REVISION BUMPS - Every verification write increments revision
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any

DEFAULT_VERIFICATION_THRESHOLD = 3
SCHEMA_VERSION = 1


class VerificationStatus(str, Enum):
    """Trust status of a video.

    PENDING is the initial state. VERIFIED is reached automatically when the
    attestation count meets the threshold. REJECTED is only ever set by an
    external moderation action.
    """

    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"

    def is_terminal(self) -> bool:
        """Check if no further attestations are accepted in this state."""
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES: frozenset[VerificationStatus] = frozenset(
    {VerificationStatus.VERIFIED, VerificationStatus.REJECTED}
)


class VerifierRelationship(str, Enum):
    """How the verifier knows the athlete."""

    COACH = "coach"
    TEAMMATE = "teammate"
    PARENT = "parent"
    FRIEND = "friend"
    WITNESS = "witness"
    OTHER = "other"


@dataclass(frozen=True, eq=True)
class VerificationAttestation:
    """One verifier's claim that a video is authentic.

    The verifier_id is display-only: it is minted without any authentication
    and carries no security weight. The anti-fraud keys are
    device_fingerprint and ip_address.

    Attributes:
        verifier_id: Display identifier, e.g. "anon-1718000000000".
        verifier_name: Name the verifier entered.
        verifier_email: Email the verifier entered.
        relationship: How the verifier knows the athlete.
        verified_at: When the attestation was recorded (UTC, tz-aware).
        device_fingerprint: Opaque device hash (anti-fraud key).
        ip_address: Client IP address (anti-fraud key).
        user_agent: Browser/device description, informational only.
        message: Optional free-text note from the verifier.
    """

    verifier_id: str
    verifier_name: str
    verifier_email: str
    relationship: VerifierRelationship
    verified_at: datetime
    device_fingerprint: str
    ip_address: str
    user_agent: str | None = None
    message: str | None = None

    def __post_init__(self) -> None:
        """Validate attestation fields after initialization.

        Raises:
            ValueError: If any field validation fails.
        """
        if self.verified_at.tzinfo is None:
            raise ValueError("verified_at must be timezone-aware (UTC)")
        if not self.device_fingerprint:
            raise ValueError("device_fingerprint must not be empty")
        if not self.ip_address:
            raise ValueError("ip_address must not be empty")

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for storage and log payloads.

        Returns:
            JSON-compatible dictionary representation.
        """
        return {
            "verifier_id": self.verifier_id,
            "verifier_name": self.verifier_name,
            "verifier_email": self.verifier_email,
            "relationship": self.relationship.value,
            "verified_at": self.verified_at.isoformat(),
            "device_fingerprint": self.device_fingerprint,
            "ip_address": self.ip_address,
            "user_agent": self.user_agent,
            "message": self.message,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VerificationAttestation:
        """Deserialize from dictionary.

        Raises:
            KeyError: If required fields are missing.
            ValueError: If field values are invalid.
        """
        return cls(
            verifier_id=data["verifier_id"],
            verifier_name=data["verifier_name"],
            verifier_email=data["verifier_email"],
            relationship=VerifierRelationship(data["relationship"]),
            verified_at=datetime.fromisoformat(data["verified_at"]),
            device_fingerprint=data["device_fingerprint"],
            ip_address=data["ip_address"],
            user_agent=data.get("user_agent"),
            message=data.get("message"),
        )


@dataclass(frozen=True)
class VerificationProgress:
    """Read projection of a video's verification state.

    Attributes:
        video_id: The video this progress describes.
        current_count: Number of accepted attestations.
        threshold: Attestations required for consensus.
        status: Current verification status.
    """

    video_id: str
    current_count: int
    threshold: int
    status: VerificationStatus

    @property
    def remaining(self) -> int:
        """Attestations still needed to reach the threshold (never negative)."""
        return max(0, self.threshold - self.current_count)

    @property
    def is_fully_verified(self) -> bool:
        return self.status == VerificationStatus.VERIFIED


@dataclass(frozen=True)
class VideoRecord:
    """A talent video and its accumulated attestations.

    Attributes:
        id: Unique video identifier.
        owner_id: The athlete who uploaded the video.
        title: Display title.
        upload_date: When the video was registered (UTC, tz-aware).
        verification_threshold: Attestations required for consensus.
        verification_status: Current trust status.
        verifications: Attestations in submission order.
        verification_deadline: Intended cutoff, enforced externally.
        verification_link: Shareable link verifiers use to attest.
        description: Optional long description.
        sport / sport_name / main_category / main_category_name /
        specific_skill / skill_category: Skill taxonomy fields.
        duration_seconds: Video length in whole seconds.
        view_count: Number of recorded views.
        revision: Write counter used for conditional writes.
        rejection_reason: Set only by the external moderation hook.
        rejected_at: When the moderation hook rejected the video.
        updated_at: Last write to verification fields.
    """

    id: str
    owner_id: str
    title: str
    upload_date: datetime
    verification_threshold: int = DEFAULT_VERIFICATION_THRESHOLD
    verification_status: VerificationStatus = VerificationStatus.PENDING
    verifications: tuple[VerificationAttestation, ...] = field(default_factory=tuple)
    verification_deadline: datetime | None = None
    verification_link: str | None = None
    description: str | None = None
    sport: str | None = None
    sport_name: str | None = None
    main_category: str | None = None
    main_category_name: str | None = None
    specific_skill: str | None = None
    skill_category: str | None = None
    duration_seconds: int = 0
    view_count: int = 0
    revision: int = 0
    rejection_reason: str | None = None
    rejected_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        """Validate record fields after initialization.

        Raises:
            ValueError: If any field validation fails.
        """
        if not self.id:
            raise ValueError("id must not be empty")
        if not self.owner_id:
            raise ValueError("owner_id must not be empty")
        if self.upload_date.tzinfo is None:
            raise ValueError("upload_date must be timezone-aware (UTC)")
        if self.verification_threshold < 1:
            raise ValueError(
                f"verification_threshold must be at least 1, "
                f"got {self.verification_threshold}"
            )
        if self.view_count < 0:
            raise ValueError(f"view_count must be non-negative, got {self.view_count}")
        if self.revision < 0:
            raise ValueError(f"revision must be non-negative, got {self.revision}")

    @property
    def verification_count(self) -> int:
        return len(self.verifications)

    def progress(self) -> VerificationProgress:
        """Project the record into a VerificationProgress."""
        return VerificationProgress(
            video_id=self.id,
            current_count=self.verification_count,
            threshold=self.verification_threshold,
            status=self.verification_status,
        )

    def with_attestation(
        self,
        attestation: VerificationAttestation,
        new_status: VerificationStatus,
        updated_at: datetime,
    ) -> VideoRecord:
        """Return a copy with the attestation appended and revision bumped.

        The threshold and every other field are carried over unchanged.
        """
        return replace(
            self,
            verifications=(*self.verifications, attestation),
            verification_status=new_status,
            revision=self.revision + 1,
            updated_at=updated_at,
        )

    def with_view_count(self, view_count: int) -> VideoRecord:
        """Return a copy with a new view count (revision is not bumped)."""
        return replace(self, view_count=view_count)

    def rejected(self, reason: str, rejected_at: datetime) -> VideoRecord:
        """Return a copy marked rejected by the moderation hook."""
        return replace(
            self,
            verification_status=VerificationStatus.REJECTED,
            rejection_reason=reason,
            rejected_at=rejected_at,
            revision=self.revision + 1,
            updated_at=rejected_at,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary (ISO datetimes, enum values as strings).

        WARNING: Never use asdict() - it breaks enum/datetime serialization.
        """
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "title": self.title,
            "description": self.description,
            "sport": self.sport,
            "sport_name": self.sport_name,
            "main_category": self.main_category,
            "main_category_name": self.main_category_name,
            "specific_skill": self.specific_skill,
            "skill_category": self.skill_category,
            "upload_date": self.upload_date.isoformat(),
            "duration_seconds": self.duration_seconds,
            "view_count": self.view_count,
            "verification_status": self.verification_status.value,
            "verification_threshold": self.verification_threshold,
            "verification_deadline": (
                self.verification_deadline.isoformat()
                if self.verification_deadline
                else None
            ),
            "verification_link": self.verification_link,
            "verifications": [v.to_dict() for v in self.verifications],
            "revision": self.revision,
            "rejection_reason": self.rejection_reason,
            "rejected_at": self.rejected_at.isoformat() if self.rejected_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            "schema_version": SCHEMA_VERSION,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VideoRecord:
        """Deserialize from dictionary.

        Raises:
            KeyError: If required fields are missing.
            ValueError: If field values are invalid.
        """

        def _dt(key: str) -> datetime | None:
            value = data.get(key)
            return datetime.fromisoformat(value) if value else None

        return cls(
            id=data["id"],
            owner_id=data["owner_id"],
            title=data["title"],
            description=data.get("description"),
            sport=data.get("sport"),
            sport_name=data.get("sport_name"),
            main_category=data.get("main_category"),
            main_category_name=data.get("main_category_name"),
            specific_skill=data.get("specific_skill"),
            skill_category=data.get("skill_category"),
            upload_date=datetime.fromisoformat(data["upload_date"]),
            duration_seconds=data.get("duration_seconds", 0),
            view_count=data.get("view_count", 0),
            verification_status=VerificationStatus(
                data.get("verification_status", VerificationStatus.PENDING.value)
            ),
            verification_threshold=data.get(
                "verification_threshold", DEFAULT_VERIFICATION_THRESHOLD
            ),
            verification_deadline=_dt("verification_deadline"),
            verification_link=data.get("verification_link"),
            verifications=tuple(
                VerificationAttestation.from_dict(v)
                for v in data.get("verifications", [])
            ),
            revision=data.get("revision", 0),
            rejection_reason=data.get("rejection_reason"),
            rejected_at=_dt("rejected_at"),
            updated_at=_dt("updated_at"),
        )
