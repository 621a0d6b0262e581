from typing import (
    Dict,
    Sequence,
    Tuple,
    Type,
)

from eth_typing import (
    Address,
)
from eth_utils import (
    encode_hex,
    get_extended_debug_logger,
)
import rlp
from rlp.exceptions import (
    RLPException,
)

from newchain._utils.rlp import (
    validate_item_lengths,
)
from newchain.abc import (
    BaseTransactionAPI,
    TransactionBuilderAPI,
)
from newchain.constants import (
    ACCESS_LIST_TRANSACTION_TYPE,
    DYNAMIC_FEE_TRANSACTION_TYPE,
    LEGACY_TRANSACTION_MIN_FIRST_BYTE,
    LEGACY_TRANSACTION_TYPE,
    MAX_TRANSACTION_TYPE_BYTE,
)
from newchain.exceptions import (
    MalformedEncoding,
    UnsupportedTransactionType,
)
from newchain.rlp.transactions import (
    AccessListTransaction,
    DynamicFeeTransaction,
    LegacyTransaction,
    UnsignedAccessListTransaction,
    UnsignedDynamicFeeTransaction,
    UnsignedLegacyTransaction,
)
from newchain.typing import (
    AccessList,
)
from newchain.validation import (
    validate_chain_id,
    validate_is_transaction_access_list,
)


def _freeze_access_list(
    access_list: AccessList,
) -> Tuple[Tuple[Address, Tuple[int, ...]], ...]:
    # rlp.Serializable hashes its fields, so nested lists must become tuples
    validate_is_transaction_access_list(access_list)
    return tuple(
        (account, tuple(storage_keys)) for account, storage_keys in access_list
    )


class TransactionBuilder(TransactionBuilderAPI):
    """
    Responsible for serializing transactions of ambiguous type.

    A legacy transaction is a bare rlp list. A typed transaction is its type
    byte followed by an rlp list. Within each type, the number of list elements
    tells the unsigned form from the signed one.
    """

    logger = get_extended_debug_logger("newchain.codec.TransactionBuilder")

    # type id -> {field count: transaction class}
    transaction_classes: Dict[int, Dict[int, Type[BaseTransactionAPI]]] = {
        LEGACY_TRANSACTION_TYPE: {
            len(UnsignedLegacyTransaction._meta.fields): UnsignedLegacyTransaction,
            len(LegacyTransaction._meta.fields): LegacyTransaction,
        },
        ACCESS_LIST_TRANSACTION_TYPE: {
            len(UnsignedAccessListTransaction._meta.fields): UnsignedAccessListTransaction,  # noqa: E501
            len(AccessListTransaction._meta.fields): AccessListTransaction,
        },
        DYNAMIC_FEE_TRANSACTION_TYPE: {
            len(UnsignedDynamicFeeTransaction._meta.fields): UnsignedDynamicFeeTransaction,  # noqa: E501
            len(DynamicFeeTransaction._meta.fields): DynamicFeeTransaction,
        },
    }

    @classmethod
    def encode(cls, transaction: BaseTransactionAPI) -> bytes:
        if transaction.type_id not in cls.transaction_classes:
            raise UnsupportedTransactionType(
                transaction.type_id, "Unknown transaction type"
            )
        return transaction.encode()

    @classmethod
    def decode(cls, encoded: bytes) -> BaseTransactionAPI:
        if len(encoded) == 0:
            raise MalformedEncoding(
                "Encoded transaction was empty, which makes it invalid"
            )

        first_byte = encoded[0]
        if first_byte in cls.transaction_classes and first_byte != LEGACY_TRANSACTION_TYPE:
            type_id, payload = first_byte, encoded[1:]
        elif first_byte <= MAX_TRANSACTION_TYPE_BYTE:
            raise UnsupportedTransactionType(first_byte, "Unknown transaction type")
        else:
            # Not a type byte: only a legacy rlp list can follow.
            type_id, payload = LEGACY_TRANSACTION_TYPE, encoded

        transaction = cls._decode_payload(type_id, payload)
        cls.logger.debug2(
            "Decoded %s from %d bytes: %s",
            type(transaction).__name__,
            len(encoded),
            encode_hex(encoded),
        )
        return transaction

    @classmethod
    def _decode_payload(cls, type_id: int, payload: bytes) -> BaseTransactionAPI:
        validate_item_lengths(payload)

        try:
            items = rlp.decode(payload)
        except RLPException as err:
            raise MalformedEncoding(f"Invalid rlp for type {type_id}: {err}") from err

        if not isinstance(items, list):
            if type_id == LEGACY_TRANSACTION_TYPE and payload[0] < LEGACY_TRANSACTION_MIN_FIRST_BYTE:  # noqa: E501
                raise MalformedEncoding(
                    f"Transaction must be an rlp list, got a string starting {payload[0]:#x}"
                )
            raise MalformedEncoding(f"Type {type_id} payload must be an rlp list")

        field_counts = cls.transaction_classes[type_id]
        try:
            transaction_class = field_counts[len(items)]
        except KeyError:
            raise MalformedEncoding(
                f"Type {type_id} transaction must have one of"
                f" {sorted(field_counts)} fields, got {len(items)}"
            )

        try:
            return transaction_class.deserialize(items)
        except RLPException as err:
            raise MalformedEncoding(
                f"Invalid field in {transaction_class.__name__}: {err}"
            ) from err

    #
    # Constructors
    #
    @classmethod
    def new_unsigned_legacy_transaction(
        cls,
        nonce: int,
        gas_price: int,
        gas: int,
        to: Address,
        value: int,
        data: bytes,
    ) -> UnsignedLegacyTransaction:
        transaction = UnsignedLegacyTransaction(nonce, gas_price, gas, to, value, data)
        transaction.validate()
        return transaction

    @classmethod
    def new_legacy_transaction(
        cls,
        nonce: int,
        gas_price: int,
        gas: int,
        to: Address,
        value: int,
        data: bytes,
        v: int,
        r: int,
        s: int,
    ) -> LegacyTransaction:
        return LegacyTransaction(nonce, gas_price, gas, to, value, data, v, r, s)

    @classmethod
    def new_unsigned_access_list_transaction(
        cls,
        chain_id: int,
        nonce: int,
        gas_price: int,
        gas: int,
        to: Address,
        value: int,
        data: bytes,
        access_list: Sequence[Tuple[Address, Sequence[int]]],
    ) -> UnsignedAccessListTransaction:
        validate_chain_id(chain_id)
        transaction = UnsignedAccessListTransaction(
            chain_id,
            nonce,
            gas_price,
            gas,
            to,
            value,
            data,
            _freeze_access_list(access_list),
        )
        transaction.validate()
        return transaction

    @classmethod
    def new_access_list_transaction(
        cls,
        chain_id: int,
        nonce: int,
        gas_price: int,
        gas: int,
        to: Address,
        value: int,
        data: bytes,
        access_list: Sequence[Tuple[Address, Sequence[int]]],
        y_parity: int,
        r: int,
        s: int,
    ) -> AccessListTransaction:
        return AccessListTransaction(
            chain_id,
            nonce,
            gas_price,
            gas,
            to,
            value,
            data,
            _freeze_access_list(access_list),
            y_parity,
            r,
            s,
        )

    @classmethod
    def new_unsigned_dynamic_fee_transaction(
        cls,
        chain_id: int,
        nonce: int,
        max_priority_fee_per_gas: int,
        max_fee_per_gas: int,
        gas: int,
        to: Address,
        value: int,
        data: bytes,
        access_list: Sequence[Tuple[Address, Sequence[int]]],
    ) -> UnsignedDynamicFeeTransaction:
        validate_chain_id(chain_id)
        transaction = UnsignedDynamicFeeTransaction(
            chain_id,
            nonce,
            max_priority_fee_per_gas,
            max_fee_per_gas,
            gas,
            to,
            value,
            data,
            _freeze_access_list(access_list),
        )
        transaction.validate()
        return transaction

    @classmethod
    def new_dynamic_fee_transaction(
        cls,
        chain_id: int,
        nonce: int,
        max_priority_fee_per_gas: int,
        max_fee_per_gas: int,
        gas: int,
        to: Address,
        value: int,
        data: bytes,
        access_list: Sequence[Tuple[Address, Sequence[int]]],
        y_parity: int,
        r: int,
        s: int,
    ) -> DynamicFeeTransaction:
        return DynamicFeeTransaction(
            chain_id,
            nonce,
            max_priority_fee_per_gas,
            max_fee_per_gas,
            gas,
            to,
            value,
            data,
            _freeze_access_list(access_list),
            y_parity,
            r,
            s,
        )
