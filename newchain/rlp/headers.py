from typing import (
    cast,
)

from eth_hash.auto import (
    keccak,
)
from eth_typing import (
    Hash32,
)
from eth_utils import (
    encode_hex,
)
import rlp
from rlp.exceptions import (
    RLPException,
)
from rlp.sedes import (
    big_endian_int,
    binary,
)

from newchain._utils.rlp import (
    validate_item_lengths,
)
from newchain.abc import (
    BlockHeaderAPI,
)
from newchain.exceptions import (
    MalformedEncoding,
)

from .sedes import (
    address,
    block_nonce,
    bloom,
    hash32,
    trie_root,
)


BLOCK_HEADER_FIELDS = [
    ("parent_hash", hash32),
    ("uncles_hash", hash32),
    ("coinbase", address),
    ("state_root", trie_root),
    ("transaction_root", trie_root),
    ("receipt_root", trie_root),
    ("bloom", bloom),
    ("difficulty", big_endian_int),
    ("block_number", big_endian_int),
    ("gas_limit", big_endian_int),
    ("gas_used", big_endian_int),
    ("timestamp", big_endian_int),
    ("extra_data", binary),
    ("mix_hash", hash32),
    ("nonce", block_nonce),
]


class BlockHeader(rlp.Serializable, BlockHeaderAPI):
    fields = BLOCK_HEADER_FIELDS

    def __str__(self) -> str:
        return f"<BlockHeader #{self.block_number} {encode_hex(self.hash)[2:10]}>"

    _hash = None

    @property
    def hash(self) -> Hash32:
        if self._hash is None:
            self._hash = keccak(rlp.encode(self))
        return cast(Hash32, self._hash)

    @property
    def hex_hash(self) -> str:
        return encode_hex(self.hash)

    @property
    def base_fee_per_gas(self) -> int:
        raise AttributeError("Base fee per gas not available until London fork")


class LondonBlockHeader(rlp.Serializable, BlockHeaderAPI):
    fields = BLOCK_HEADER_FIELDS + [
        ("base_fee_per_gas", big_endian_int),
    ]

    def __str__(self) -> str:
        return f"<LondonBlockHeader #{self.block_number} {encode_hex(self.hash)[2:10]}>"  # noqa: E501

    _hash = None

    @property
    def hash(self) -> Hash32:
        if self._hash is None:
            self._hash = keccak(rlp.encode(self))
        return cast(Hash32, self._hash)

    @property
    def hex_hash(self) -> str:
        return encode_hex(self.hash)


def decode_block_header(encoded: bytes) -> BlockHeaderAPI:
    """
    Decode a header with or without the trailing base fee field.
    """
    validate_item_lengths(encoded)
    try:
        items = rlp.decode(encoded)
    except RLPException as err:
        raise MalformedEncoding(f"Invalid rlp for block header: {err}") from err

    if not isinstance(items, list):
        raise MalformedEncoding("Block header must be an rlp list")

    is_london = len(items) == len(LondonBlockHeader._meta.fields)
    header_class = LondonBlockHeader if is_london else BlockHeader

    try:
        return header_class.deserialize(items)
    except RLPException as err:
        raise MalformedEncoding(
            f"Invalid field in {header_class.__name__}: {err}"
        ) from err
