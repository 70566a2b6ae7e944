"""Domain layer for TalentProof.

Pure models, errors and calculations. Nothing in this package performs I/O
or imports from the application, infrastructure or api layers.
"""

from talentproof.domain.exceptions import TalentProofError

__all__: list[str] = ["TalentProofError"]
