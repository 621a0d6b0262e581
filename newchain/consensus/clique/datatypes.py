from enum import (
    Enum,
)

from .constants import (
    NONCE_AUTH,
    NONCE_DROP,
)


class VoteAction(Enum):
    """
    The action that is being voted on (nominate or kick).
    """

    # Using the byte representation rather than auto()
    # makes serialization more convenient
    NOMINATE = NONCE_AUTH
    KICK = NONCE_DROP
