import logging
from typing import (
    Optional,
)

from eth_keys.datatypes import (
    PrivateKey,
)
from eth_typing import (
    Address,
    Hash32,
)
from eth_utils import (
    encode_hex,
)

from newchain._utils.signatures import (
    public_key_to_address,
    recover_public_key,
    split_signature,
)
from newchain.abc import (
    BlockHeaderAPI,
)
from newchain.constants import (
    ZERO_ADDRESS,
)
from newchain.exceptions import (
    MissingSignatureSuffix,
)

from .constants import (
    SIGNATURE_LENGTH,
)
from .datatypes import (
    VoteAction,
)

logger = logging.getLogger("newchain.consensus.clique")


def get_signature_hash(header: BlockHeaderAPI) -> Hash32:
    """
    Return the hash that is signed by the block producer. It is defined as the hash of
    the ``header`` except that the last 65 bytes of the ``extra_data`` (the signature)
    are removed before calculating the hash.
    """
    if len(header.extra_data) < SIGNATURE_LENGTH:
        raise MissingSignatureSuffix(
            f"extra-data {SIGNATURE_LENGTH} byte signature suffix missing,"
            f" got {len(header.extra_data)} bytes"
        )

    signature_header: BlockHeaderAPI = header.copy(
        extra_data=header.extra_data[: len(header.extra_data) - SIGNATURE_LENGTH]
    )
    return signature_header.hash


def get_block_signer(header: BlockHeaderAPI) -> Address:
    """
    Return the address of the signer of the ``header``.
    """
    signature_hash = get_signature_hash(header)
    recovery_id, r, s = split_signature(header.extra_data[-SIGNATURE_LENGTH:])

    public_key = recover_public_key(signature_hash, r, s, recovery_id)
    signer = public_key_to_address(public_key)

    logger.debug(
        "Block #%d sealed by %s", header.block_number, encode_hex(signer)
    )
    return signer


def sign_block_header(
    header: BlockHeaderAPI, private_key: PrivateKey
) -> BlockHeaderAPI:
    """
    Seal ``header``, replacing the last 65 bytes of its ``extra_data`` with the
    signature. The header must already reserve room for the seal.
    """
    signature_hash = get_signature_hash(header)
    signature = private_key.sign_msg_hash(signature_hash)

    signed_extra_data = header.extra_data[:-SIGNATURE_LENGTH] + signature.to_bytes()
    return header.copy(extra_data=signed_extra_data)


def get_vote_action(header: BlockHeaderAPI) -> Optional[VoteAction]:
    """
    Return the vote cast by ``header`` on the signer in its ``coinbase``, or
    ``None`` if the header doesn't vote.
    """
    if header.coinbase == ZERO_ADDRESS:
        return None

    try:
        return VoteAction(header.nonce)
    except ValueError:
        return None
