import logging

from eth_typing import (
    Address,
    Hash32,
)
from eth_utils import (
    encode_hex,
)

from newchain._utils.transactions import (
    verify_sender,
)
from newchain.abc import (
    ChainClientAPI,
    SignedTransactionAPI,
)

logger = logging.getLogger("newchain.client")


def send_signed_transaction(
    client: ChainClientAPI,
    transaction: SignedTransactionAPI,
    claimed_from: Address = None,
) -> Hash32:
    """
    Hand ``transaction`` to ``client`` as raw bytes and return the hash the node
    reports. When ``claimed_from`` is given, the recovered sender must match it
    before anything is sent.
    """
    if claimed_from is not None:
        verify_sender(transaction, claimed_from)

    raw_transaction = transaction.encode()
    logger.debug(
        "Sending type %d transaction %s (%d bytes)",
        transaction.type_id,
        encode_hex(transaction.hash),
        len(raw_transaction),
    )
    return client.send_raw_transaction(raw_transaction)
