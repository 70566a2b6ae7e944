"""
TalentProof - community verification for athlete talent videos.

Unaffiliated verifiers attest that a short talent video is authentic.
Attestations accumulate on the video record until a consensus threshold
flips it to verified. Each device and each network may attest only once
per video.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
