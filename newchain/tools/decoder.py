import logging
from typing import (
    Union,
)

from eth_utils import (
    decode_hex,
    encode_hex,
    int_to_big_endian,
    to_checksum_address,
)

from newchain._utils.transactions import (
    extract_transaction_public_key,
    get_message_for_signing,
    get_signing_digest,
)
from newchain._utils.units import (
    to_decimal_string,
)
from newchain.abc import (
    SignedTransactionAPI,
)
from newchain.codec import (
    TransactionBuilder,
)
from newchain.constants import (
    DYNAMIC_FEE_TRANSACTION_TYPE,
    ETHER_UNIT,
    LEGACY_TRANSACTION_TYPE,
    UNCOMPRESSED_PUBLIC_KEY_PREFIX,
)
from newchain.exceptions import (
    MalformedEncoding,
)
from newchain.typing import (
    TransactionReport,
)

logger = logging.getLogger("newchain.tools.decoder")


def _int_to_hex(value: int) -> str:
    return encode_hex(int_to_big_endian(value))


def _to_raw_bytes(raw_transaction: Union[str, bytes]) -> bytes:
    if isinstance(raw_transaction, str):
        try:
            raw_transaction = decode_hex(raw_transaction.strip())
        except ValueError as err:
            raise MalformedEncoding(f"Raw transaction is not hex: {err}") from err
    if len(raw_transaction) == 0:
        raise MalformedEncoding("Raw transaction is empty")
    return raw_transaction


def decode_raw_transaction(
    raw_transaction: Union[str, bytes], unit: str = ETHER_UNIT
) -> TransactionReport:
    """
    Decode a raw transaction into a JSON-ready dict. For a signed transaction
    the sender and public key are recovered, along with the exact message and
    digest that were signed.
    """
    encoded = _to_raw_bytes(raw_transaction)
    transaction = TransactionBuilder.decode(encoded)

    report: TransactionReport = {
        "type": transaction.type_id,
        "from": None,
        "to": to_checksum_address(transaction.to) if transaction.to else None,
        "value": to_decimal_string(transaction.value, unit),
        "data": encode_hex(transaction.data),
        "nonce": transaction.nonce,
    }

    if transaction.type_id == DYNAMIC_FEE_TRANSACTION_TYPE:
        report["maxPriorityFeePerGas"] = transaction.max_priority_fee_per_gas
        report["maxFeePerGas"] = transaction.max_fee_per_gas
    else:
        report["gasPrice"] = transaction.gas_price
    report["gas"] = transaction.gas

    if transaction.type_id != LEGACY_TRANSACTION_TYPE:
        report["accessList"] = [
            {
                "address": to_checksum_address(account),
                "storageKeys": [encode_hex(key.to_bytes(32, "big")) for key in keys],
            }
            for account, keys in transaction.access_list
        ]

    report["hash"] = encode_hex(transaction.hash)
    report["chainID"] = transaction.chain_id
    report["raw"] = encode_hex(encoded)
    report["unsignedRawTx"] = encode_hex(get_message_for_signing(transaction))
    report["unsignedRawTxHash"] = encode_hex(get_signing_digest(transaction))

    if isinstance(transaction, SignedTransactionAPI):
        public_key = extract_transaction_public_key(transaction)
        report["from"] = public_key.to_checksum_address()
        if transaction.type_id == LEGACY_TRANSACTION_TYPE:
            report["v"] = _int_to_hex(transaction.v)
        else:
            report["yParity"] = _int_to_hex(transaction.y_parity)
        report["r"] = _int_to_hex(transaction.r)
        report["s"] = _int_to_hex(transaction.s)
        report["publicKey"] = encode_hex(
            UNCOMPRESSED_PUBLIC_KEY_PREFIX + public_key.to_bytes()
        )
    else:
        report["publicKey"] = None

    logger.debug("Decoded raw transaction %s", report["hash"])
    return report
