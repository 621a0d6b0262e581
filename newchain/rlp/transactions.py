from typing import (
    Optional,
    Sequence,
    Tuple,
    cast,
)

from cached_property import (
    cached_property,
)
from eth_hash.auto import (
    keccak,
)
from eth_keys.datatypes import (
    PrivateKey,
)
from eth_typing import (
    Address,
    Hash32,
)
from eth_utils import (
    to_bytes,
)
import rlp
from rlp.sedes import (
    big_endian_int,
    binary,
)

from newchain._utils.transactions import (
    create_transaction_signature,
    extract_chain_id,
    extract_recovery_id,
    extract_transaction_sender,
    get_message_for_signing,
    validate_transaction_signature,
)
from newchain.abc import (
    BaseTransactionAPI,
    SignedTransactionAPI,
    UnsignedTransactionAPI,
)
from newchain.constants import (
    ACCESS_LIST_TRANSACTION_TYPE,
    DYNAMIC_FEE_TRANSACTION_TYPE,
    LEGACY_TRANSACTION_TYPE,
)
from newchain.exceptions import (
    InvalidSignatureValues,
)
from newchain.validation import (
    validate_is_bytes,
    validate_is_transaction_access_list,
    validate_transaction_recipient,
    validate_uint64,
    validate_uint256,
)

from .sedes import (
    access_list,
    address,
)


class BaseTransactionMethods(BaseTransactionAPI):
    def get_message_for_signing(self, chain_id: int = None) -> bytes:
        return get_message_for_signing(self, chain_id)

    @property
    def access_list(self) -> Sequence[Tuple[Address, Sequence[int]]]:
        return ()

    # Transactions without a dynamic fee pay the gas price for both caps
    @property
    def max_priority_fee_per_gas(self) -> int:
        return self.gas_price

    @property
    def max_fee_per_gas(self) -> int:
        return self.gas_price

    def _validate_common_fields(self) -> None:
        validate_uint64(self.nonce, title="Transaction.nonce")
        validate_uint64(self.gas, title="Transaction.gas")
        validate_transaction_recipient(self.to, title="Transaction.to")
        validate_uint256(self.value, title="Transaction.value")
        validate_is_bytes(self.data, title="Transaction.data")


class LegacyTransactionMethods(BaseTransactionMethods):
    type_id = LEGACY_TRANSACTION_TYPE

    def encode(self) -> bytes:
        return rlp.encode(self)

    @property
    def hash(self) -> Hash32:
        return cast(Hash32, keccak(self.encode()))


class TypedTransactionMethods(BaseTransactionMethods):
    @cached_property
    def _type_byte(self) -> bytes:
        return to_bytes(self.type_id)

    def encode(self) -> bytes:
        return self._type_byte + rlp.encode(self)

    @property
    def hash(self) -> Hash32:
        return cast(Hash32, keccak(self.encode()))


class SignedTransactionMethods(BaseTransactionMethods, SignedTransactionAPI):
    @cached_property
    def sender(self) -> Address:
        return self.get_sender()

    def get_sender(self) -> Address:
        return extract_transaction_sender(self)

    #
    # Signature validation
    #
    def check_signature_validity(self) -> None:
        validate_transaction_signature(self)

    @property
    def is_signature_valid(self) -> bool:
        try:
            self.check_signature_validity()
        except InvalidSignatureValues:
            return False
        else:
            return True

    def _validate_signature_fields(self) -> None:
        validate_uint256(self.r, title="Transaction.r")
        validate_uint256(self.s, title="Transaction.s")


#
# Legacy
#
LEGACY_TRANSACTION_FIELDS = [
    ("nonce", big_endian_int),
    ("gas_price", big_endian_int),
    ("gas", big_endian_int),
    ("to", address),
    ("value", big_endian_int),
    ("data", binary),
]


class UnsignedLegacyTransaction(
    rlp.Serializable, LegacyTransactionMethods, UnsignedTransactionAPI
):
    fields = LEGACY_TRANSACTION_FIELDS

    @property
    def chain_id(self) -> Optional[int]:
        # supplied at signing time
        return None

    def validate(self) -> None:
        self._validate_common_fields()
        validate_uint256(self.gas_price, title="Transaction.gas_price")

    def as_signed_transaction(
        self, private_key: PrivateKey, chain_id: int = None
    ) -> "LegacyTransaction":
        v, r, s = create_transaction_signature(self, private_key, chain_id=chain_id)
        return self.with_signature(v, r, s)

    def with_signature(self, v: int, r: int, s: int) -> "LegacyTransaction":
        return LegacyTransaction(*self, v, r, s)


class LegacyTransaction(
    rlp.Serializable, LegacyTransactionMethods, SignedTransactionMethods
):
    fields = LEGACY_TRANSACTION_FIELDS + [
        ("v", big_endian_int),
        ("r", big_endian_int),
        ("s", big_endian_int),
    ]

    @property
    def chain_id(self) -> Optional[int]:
        return extract_chain_id(self.v)

    @property
    def y_parity(self) -> int:
        return extract_recovery_id(self.type_id, self.v)

    def validate(self) -> None:
        self._validate_common_fields()
        validate_uint256(self.gas_price, title="Transaction.gas_price")
        validate_uint256(self.v, title="Transaction.v")
        self._validate_signature_fields()
        self.check_signature_validity()

    def as_unsigned_transaction(self) -> UnsignedLegacyTransaction:
        return UnsignedLegacyTransaction(*self[:-3])


#
# Access list (EIP-2930)
#
ACCESS_LIST_TRANSACTION_FIELDS = [
    ("chain_id", big_endian_int),
    ("nonce", big_endian_int),
    ("gas_price", big_endian_int),
    ("gas", big_endian_int),
    ("to", address),
    ("value", big_endian_int),
    ("data", binary),
    ("access_list", access_list),
]

TYPED_SIGNATURE_FIELDS = [
    ("y_parity", big_endian_int),
    ("r", big_endian_int),
    ("s", big_endian_int),
]


class UnsignedAccessListTransaction(
    rlp.Serializable, TypedTransactionMethods, UnsignedTransactionAPI
):
    type_id = ACCESS_LIST_TRANSACTION_TYPE
    fields = ACCESS_LIST_TRANSACTION_FIELDS

    def validate(self) -> None:
        validate_uint256(self.chain_id, title="Transaction.chain_id")
        self._validate_common_fields()
        validate_uint256(self.gas_price, title="Transaction.gas_price")
        validate_is_transaction_access_list(self.access_list)

    def as_signed_transaction(
        self, private_key: PrivateKey, chain_id: int = None
    ) -> "AccessListTransaction":
        v, r, s = create_transaction_signature(self, private_key, chain_id=chain_id)
        return self.with_signature(v, r, s)

    def with_signature(self, v: int, r: int, s: int) -> "AccessListTransaction":
        return AccessListTransaction(*self, v, r, s)


class AccessListTransaction(
    rlp.Serializable, TypedTransactionMethods, SignedTransactionMethods
):
    type_id = ACCESS_LIST_TRANSACTION_TYPE
    fields = ACCESS_LIST_TRANSACTION_FIELDS + TYPED_SIGNATURE_FIELDS

    def validate(self) -> None:
        self.as_unsigned_transaction().validate()
        self._validate_signature_fields()
        self.check_signature_validity()

    def as_unsigned_transaction(self) -> UnsignedAccessListTransaction:
        return UnsignedAccessListTransaction(*self[:-3])


#
# Dynamic fee (EIP-1559)
#
DYNAMIC_FEE_TRANSACTION_FIELDS = [
    ("chain_id", big_endian_int),
    ("nonce", big_endian_int),
    ("max_priority_fee_per_gas", big_endian_int),
    ("max_fee_per_gas", big_endian_int),
    ("gas", big_endian_int),
    ("to", address),
    ("value", big_endian_int),
    ("data", binary),
    ("access_list", access_list),
]


class DynamicFeeTransactionMethods(TypedTransactionMethods):
    type_id = DYNAMIC_FEE_TRANSACTION_TYPE

    @property
    def gas_price(self) -> None:
        raise AttributeError(
            "Gas price is no longer available."
            "See max_priority_fee_per_gas or max_fee_per_gas"
        )

    def _validate_fee_fields(self) -> None:
        validate_uint256(self.chain_id, title="Transaction.chain_id")
        validate_uint256(
            self.max_priority_fee_per_gas, title="Transaction.max_priority_fee_per_gas"
        )
        validate_uint256(self.max_fee_per_gas, title="Transaction.max_fee_per_gas")


class UnsignedDynamicFeeTransaction(
    rlp.Serializable, DynamicFeeTransactionMethods, UnsignedTransactionAPI
):
    fields = DYNAMIC_FEE_TRANSACTION_FIELDS

    def validate(self) -> None:
        self._validate_fee_fields()
        self._validate_common_fields()
        validate_is_transaction_access_list(self.access_list)

    def as_signed_transaction(
        self, private_key: PrivateKey, chain_id: int = None
    ) -> "DynamicFeeTransaction":
        v, r, s = create_transaction_signature(self, private_key, chain_id=chain_id)
        return self.with_signature(v, r, s)

    def with_signature(self, v: int, r: int, s: int) -> "DynamicFeeTransaction":
        return DynamicFeeTransaction(*self, v, r, s)


class DynamicFeeTransaction(
    rlp.Serializable, DynamicFeeTransactionMethods, SignedTransactionMethods
):
    fields = DYNAMIC_FEE_TRANSACTION_FIELDS + TYPED_SIGNATURE_FIELDS

    def validate(self) -> None:
        self.as_unsigned_transaction().validate()
        self._validate_signature_fields()
        self.check_signature_validity()

    def as_unsigned_transaction(self) -> UnsignedDynamicFeeTransaction:
        return UnsignedDynamicFeeTransaction(*self[:-3])
