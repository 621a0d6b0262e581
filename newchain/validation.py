from typing import (
    Any,
    Sequence,
    Tuple,
    Union,
)

from eth_typing import (
    Address,
)
from eth_utils import (
    ValidationError,
)

from newchain.constants import (
    ADDRESS_LENGTH,
    CREATE_CONTRACT_ADDRESS,
    MAX_CHAIN_ID_BYTES,
    UINT_64_MAX,
    UINT_256_MAX,
)
from newchain.exceptions import (
    InvalidChainId,
)


def validate_is_bytes(value: bytes, title: str = "Value") -> None:
    if not isinstance(value, bytes):
        raise ValidationError(f"{title} must be a byte string.  Got: {type(value)}")


def validate_is_integer(value: Union[int, bool], title: str = "Value") -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValidationError(f"{title} must be a an integer.  Got: {type(value)}")


def validate_length(value: Sequence[Any], length: int, title: str = "Value") -> None:
    if not len(value) == length:
        raise ValidationError(
            f"{title} must be of length {length}.  "
            f"Got {value!r} of length {len(value)}"
        )


def validate_lte(value: int, maximum: int, title: str = "Value") -> None:
    validate_is_integer(value, title=title)
    if value > maximum:
        raise ValidationError(
            f"{title} {value} is not less than or equal to {maximum}"
        )


def validate_uint64(value: int, title: str = "Value") -> None:
    validate_is_integer(value, title=title)
    if value < 0:
        raise ValidationError(f"{title} cannot be negative: Got: {value}")
    if value > UINT_64_MAX:
        raise ValidationError(f"{title} exceeds maximum UINT64 size.  Got: {value}")


def validate_uint256(value: int, title: str = "Value") -> None:
    validate_is_integer(value, title=title)
    if value < 0:
        raise ValidationError(f"{title} cannot be negative: Got: {value}")
    if value > UINT_256_MAX:
        raise ValidationError(f"{title} exceeds maximum UINT256 size.  Got: {value}")


def validate_canonical_address(value: Address, title: str = "Value") -> None:
    if not isinstance(value, bytes) or not len(value) == ADDRESS_LENGTH:
        raise ValidationError(f"{title} {value!r} is not a valid canonical address")


def validate_transaction_recipient(value: Address, title: str = "Value") -> None:
    if value != CREATE_CONTRACT_ADDRESS:
        validate_canonical_address(value, title=title)


def validate_is_transaction_access_list(
    invalid_access_list: Sequence[Tuple[Address, Sequence[int]]]
) -> None:
    if not isinstance(invalid_access_list, (list, tuple)):
        raise ValidationError(
            f"Transaction access_list must be a list, got: {type(invalid_access_list)}"
        )
    for index, access in enumerate(invalid_access_list):
        if len(access) != 2:
            raise ValidationError(
                "access_list entries must be a pair of account and storage keys, "
                f"got {access!r} at index {index}"
            )
        account, storage_keys = access
        validate_canonical_address(account, f"access_list address at index {index}")
        if not isinstance(storage_keys, (list, tuple)):
            raise ValidationError(
                f"access_list storage keys at index {index} must be a list, "
                f"got: {type(storage_keys)}"
            )
        for key_index, storage_key in enumerate(storage_keys):
            validate_uint256(
                storage_key,
                f"access_list storage key {key_index} at index {index}",
            )


def validate_chain_id(chain_id: int) -> None:
    """
    Fail fast on a chain id that no network can use: it must be a positive
    integer that fits in 8 bytes.
    """
    if not isinstance(chain_id, int) or isinstance(chain_id, bool):
        raise InvalidChainId(f"Chain id must be an integer.  Got: {type(chain_id)}")
    if chain_id <= 0:
        raise InvalidChainId(f"Chain id must be positive.  Got: {chain_id}")
    if chain_id.bit_length() > MAX_CHAIN_ID_BYTES * 8:
        raise InvalidChainId(
            f"Chain id must fit in {MAX_CHAIN_ID_BYTES} bytes.  Got: {chain_id}"
        )
