"""Verification link minting.

Links are deterministic and unsigned: {base_url}/verify/{owner_id}/{video_id}.
Possession of the link is the only access control; abuse is contained by
the duplicate-device/network defenses, not by link secrecy.
"""

from __future__ import annotations

from urllib.parse import quote


def mint_verification_link(base_url: str, owner_id: str, video_id: str) -> str:
    """Build the shareable verification URL for a video.

    Args:
        base_url: Public origin, e.g. "https://example.app". A trailing
            slash is ignored.
        owner_id: The athlete who owns the video.
        video_id: The video to verify.

    Returns:
        The verification URL with path segments percent-encoded.

    Raises:
        ValueError: If any argument is empty.
    """
    if not base_url or not owner_id or not video_id:
        raise ValueError("base_url, owner_id and video_id must all be non-empty")
    return (
        f"{base_url.rstrip('/')}/verify/"
        f"{quote(owner_id, safe='')}/{quote(video_id, safe='')}"
    )
