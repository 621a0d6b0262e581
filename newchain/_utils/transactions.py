import logging
from typing import (
    Callable,
    Dict,
    Optional,
    cast,
)

from eth_hash.auto import (
    keccak,
)
from eth_keys import (
    datatypes,
)
from eth_typing import (
    Address,
    Hash32,
)
from eth_utils import (
    ValidationError,
    encode_hex,
    to_checksum_address,
)
import rlp

from newchain._utils.signatures import (
    public_key_to_address,
    recover_public_key,
    split_signature,
)
from newchain.abc import (
    KeyStoreAPI,
    SignedTransactionAPI,
    TransactionFieldsAPI,
    UnsignedTransactionAPI,
)
from newchain.constants import (
    ACCESS_LIST_TRANSACTION_TYPE,
    DYNAMIC_FEE_TRANSACTION_TYPE,
    EIP155_CHAIN_ID_OFFSET,
    LEGACY_TRANSACTION_TYPE,
    V_OFFSET,
)
from newchain.exceptions import (
    InvalidSignatureValues,
    SenderMismatch,
    UnsupportedTransactionType,
)
from newchain.rlp.sedes import (
    access_list_signing_fields,
    dynamic_fee_signing_fields,
    eip155_signing_fields,
    legacy_signing_fields,
)
from newchain.typing import (
    VRS,
)
from newchain.validation import (
    validate_chain_id,
)

logger = logging.getLogger("newchain._utils.transactions")


#
# v conventions
#
def is_eip_155_signed_transaction(transaction: SignedTransactionAPI) -> bool:
    return (
        transaction.type_id == LEGACY_TRANSACTION_TYPE
        and transaction.v >= EIP155_CHAIN_ID_OFFSET
    )


def extract_chain_id(v: int) -> Optional[int]:
    """
    Return the chain id embedded in a legacy ``v``, or ``None`` if the
    transaction was signed without replay protection.
    """
    if v in (V_OFFSET, V_OFFSET + 1):
        return None
    elif v >= EIP155_CHAIN_ID_OFFSET:
        return (v - EIP155_CHAIN_ID_OFFSET) // 2
    else:
        raise InvalidSignatureValues(f"Invalid legacy signature v: {v}")


def encode_v(type_id: int, recovery_id: int, chain_id: int = None) -> int:
    if recovery_id not in (0, 1):
        raise InvalidSignatureValues(f"Recovery id must be 0 or 1, got {recovery_id}")

    if type_id == LEGACY_TRANSACTION_TYPE:
        if chain_id is None:
            return recovery_id + V_OFFSET
        else:
            return recovery_id + chain_id * 2 + EIP155_CHAIN_ID_OFFSET
    elif type_id in (ACCESS_LIST_TRANSACTION_TYPE, DYNAMIC_FEE_TRANSACTION_TYPE):
        return recovery_id
    else:
        raise UnsupportedTransactionType(type_id, "Unknown transaction type")


def extract_recovery_id(type_id: int, v: int, chain_id: int = None) -> int:
    """
    Invert :func:`encode_v`. For a legacy ``v`` the chain id is taken from
    ``v`` itself when not given.
    """
    if type_id == LEGACY_TRANSACTION_TYPE:
        if chain_id is None:
            chain_id = extract_chain_id(v)

        if chain_id is None:
            recovery_id = v - V_OFFSET
        else:
            recovery_id = v - chain_id * 2 - EIP155_CHAIN_ID_OFFSET
    elif type_id in (ACCESS_LIST_TRANSACTION_TYPE, DYNAMIC_FEE_TRANSACTION_TYPE):
        recovery_id = v
    else:
        raise UnsupportedTransactionType(type_id, "Unknown transaction type")

    if recovery_id not in (0, 1):
        raise InvalidSignatureValues(
            f"Signature v {v} does not encode a recovery id for type {type_id}"
            f" and chain id {chain_id}"
        )
    return recovery_id


def to_legacy_v(y_parity: int) -> int:
    """
    Shift a typed transaction's y_parity into the 27/28 convention.
    """
    return y_parity + V_OFFSET


#
# Signing messages
#
def _get_legacy_message(
    transaction: TransactionFieldsAPI, chain_id: Optional[int]
) -> bytes:
    fields = [
        transaction.nonce,
        transaction.gas_price,
        transaction.gas,
        transaction.to,
        transaction.value,
        transaction.data,
    ]
    if chain_id is None:
        return rlp.encode(fields, sedes=legacy_signing_fields)
    else:
        return rlp.encode(fields + [chain_id, 0, 0], sedes=eip155_signing_fields)


def _get_access_list_message(
    transaction: TransactionFieldsAPI, chain_id: Optional[int]
) -> bytes:
    payload = rlp.encode(
        [
            transaction.chain_id,
            transaction.nonce,
            transaction.gas_price,
            transaction.gas,
            transaction.to,
            transaction.value,
            transaction.data,
            transaction.access_list,
        ],
        sedes=access_list_signing_fields,
    )
    return bytes((ACCESS_LIST_TRANSACTION_TYPE,)) + payload


def _get_dynamic_fee_message(
    transaction: TransactionFieldsAPI, chain_id: Optional[int]
) -> bytes:
    payload = rlp.encode(
        [
            transaction.chain_id,
            transaction.nonce,
            transaction.max_priority_fee_per_gas,
            transaction.max_fee_per_gas,
            transaction.gas,
            transaction.to,
            transaction.value,
            transaction.data,
            transaction.access_list,
        ],
        sedes=dynamic_fee_signing_fields,
    )
    return bytes((DYNAMIC_FEE_TRANSACTION_TYPE,)) + payload


MESSAGE_BUILDERS: Dict[int, Callable[[TransactionFieldsAPI, Optional[int]], bytes]] = {
    LEGACY_TRANSACTION_TYPE: _get_legacy_message,
    ACCESS_LIST_TRANSACTION_TYPE: _get_access_list_message,
    DYNAMIC_FEE_TRANSACTION_TYPE: _get_dynamic_fee_message,
}


def get_message_for_signing(
    transaction: TransactionFieldsAPI, chain_id: int = None
) -> bytes:
    """
    Return the bytes whose keccak is signed for ``transaction``.

    Legacy transactions are replay protected when a chain id is given, or when
    the (signed) transaction already embeds one in ``v``. Typed transactions
    always sign over their own ``chain_id``; passing a different one is an error.
    """
    type_id = transaction.type_id
    try:
        build_message = MESSAGE_BUILDERS[type_id]
    except KeyError:
        raise UnsupportedTransactionType(type_id, "Unknown transaction type")

    own_chain_id = transaction.chain_id
    if chain_id is None:
        chain_id = own_chain_id
    elif own_chain_id is not None and own_chain_id != chain_id:
        raise ValidationError(
            f"Transaction is bound to chain id {own_chain_id}, cannot sign it for"
            f" chain id {chain_id}"
        )

    return build_message(transaction, chain_id)


def get_signing_digest(transaction: TransactionFieldsAPI, chain_id: int = None) -> Hash32:
    message = get_message_for_signing(transaction, chain_id)
    return cast(Hash32, keccak(message))


#
# Signing
#
def create_transaction_signature(
    unsigned_txn: UnsignedTransactionAPI,
    private_key: datatypes.PrivateKey,
    chain_id: int = None,
) -> VRS:
    if chain_id is not None:
        validate_chain_id(chain_id)

    digest = get_signing_digest(unsigned_txn, chain_id)
    signature = private_key.sign_msg_hash(digest)

    canonical_v, r, s = signature.vrs
    v = encode_v(unsigned_txn.type_id, canonical_v, chain_id)

    return VRS((v, r, s))


def sign_transaction_with_keystore(
    unsigned_txn: UnsignedTransactionAPI,
    keystore: KeyStoreAPI,
    sender: Address,
    chain_id: int = None,
) -> SignedTransactionAPI:
    """
    Sign ``unsigned_txn`` with the key held for ``sender`` and check that the
    signature really recovers to ``sender``.
    """
    if chain_id is not None:
        validate_chain_id(chain_id)

    digest = get_signing_digest(unsigned_txn, chain_id)
    recovery_id, r, s = split_signature(keystore.sign(sender, digest))
    v = encode_v(unsigned_txn.type_id, recovery_id, chain_id)

    signed_txn = unsigned_txn.with_signature(v, r, s)
    verify_sender(signed_txn, sender)

    logger.debug(
        "Signed type %d transaction %s for %s",
        signed_txn.type_id,
        encode_hex(signed_txn.hash),
        to_checksum_address(sender),
    )
    return signed_txn


#
# Sender recovery
#
def extract_transaction_public_key(
    transaction: SignedTransactionAPI,
) -> datatypes.PublicKey:
    digest = get_signing_digest(transaction)
    return recover_public_key(
        digest,
        transaction.r,
        transaction.s,
        transaction.y_parity,
        homestead=True,
    )


def extract_transaction_sender(transaction: SignedTransactionAPI) -> Address:
    public_key = extract_transaction_public_key(transaction)
    return public_key_to_address(public_key)


def validate_transaction_signature(transaction: SignedTransactionAPI) -> None:
    # raises if no key can be recovered
    extract_transaction_public_key(transaction)


def verify_sender(transaction: SignedTransactionAPI, claimed_from: Address) -> bool:
    """
    Recover the sender of ``transaction`` and compare it byte for byte with
    ``claimed_from``. A mismatch raises :class:`~newchain.exceptions.SenderMismatch`.
    """
    sender = extract_transaction_sender(transaction)
    if sender != claimed_from:
        raise SenderMismatch(
            f"Transaction recovers to {to_checksum_address(sender)}, not to the"
            f" claimed sender {encode_hex(claimed_from)}",
            claimed_from,
            sender,
        )
    return True
