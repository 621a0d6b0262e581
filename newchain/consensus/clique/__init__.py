from ._utils import (  # noqa: F401
    get_block_signer,
    get_signature_hash,
    get_vote_action,
    sign_block_header,
)
from .datatypes import (  # noqa: F401
    VoteAction,
)
