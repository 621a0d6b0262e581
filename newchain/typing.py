from typing import (
    Any,
    Dict,
    NewType,
    Sequence,
    Tuple,
    Union,
)

from eth_keys.datatypes import (
    PublicKey,
)
from eth_typing import (
    Address,
    Hash32,
)


VRS = NewType("VRS", Tuple[int, int, int])

AccessList = Sequence[Tuple[Address, Sequence[int]]]

PublicKeyLike = Union[PublicKey, bytes]

# A block number, or one of "latest", "pending", "earliest"
BlockRef = Union[int, str]

# JSON-ready description of a decoded raw transaction
TransactionReport = Dict[str, Any]


__all__ = [
    "AccessList",
    "Address",
    "BlockRef",
    "Hash32",
    "PublicKeyLike",
    "TransactionReport",
    "VRS",
]
