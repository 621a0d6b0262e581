import logging
import re
from typing import (
    Tuple,
)

import base58
from eth_typing import (
    Address,
)
from eth_utils import (
    decode_hex,
    encode_hex,
    int_to_big_endian,
)

from newchain.constants import (
    ADDRESS_LENGTH,
    CHAIN_ADDRESS_PREFIX,
    CHAIN_ADDRESS_VERSION,
)
from newchain.exceptions import (
    IllegalChainID,
    IllegalDecodedLength,
    IllegalVersion,
    InvalidChecksum,
    InvalidHexAddress,
    NotChainAddress,
)
from newchain.validation import (
    validate_canonical_address,
    validate_chain_id,
)

logger = logging.getLogger("newchain._utils.address")

HEX_ADDRESS_PATTERN = re.compile(r"^(0[xX])?[0-9a-fA-F]{40}$")


def is_hex_address(text: str) -> bool:
    return isinstance(text, str) and HEX_ADDRESS_PATTERN.match(text) is not None


def parse_hex_address(text: str) -> Address:
    """
    Parse 40 hex characters, with or without a ``0x`` prefix, into a canonical
    address. Case is not checked.
    """
    if not is_hex_address(text):
        raise InvalidHexAddress(f"Not a 20 byte hex address: {text!r}")
    return Address(decode_hex(text[-ADDRESS_LENGTH * 2:]))


def chain_id_to_bytes(chain_id: int) -> bytes:
    """
    Return the minimal big-endian encoding of ``chain_id``, as embedded in chain
    addresses.
    """
    validate_chain_id(chain_id)
    return int_to_big_endian(chain_id)


def encode_chain_address(chain_id_bytes: bytes, address: Address) -> str:
    """
    Encode ``address`` as ``NEW`` followed by the base58check of the version
    byte, the chain id bytes and the address.
    """
    validate_canonical_address(address, title="Chain address")
    payload = bytes((CHAIN_ADDRESS_VERSION,)) + chain_id_bytes + address
    return CHAIN_ADDRESS_PREFIX + base58.b58encode_check(payload).decode("ascii")


def decode_chain_address(text: str, expected_chain_id_bytes: bytes) -> Address:
    """
    Decode a ``NEW`` chain address, checking that it belongs to the chain whose
    id is ``expected_chain_id_bytes``.
    """
    if not text.startswith(CHAIN_ADDRESS_PREFIX):
        raise NotChainAddress(f"Not a {CHAIN_ADDRESS_PREFIX} address: {text!r}")

    try:
        decoded = base58.b58decode_check(text[len(CHAIN_ADDRESS_PREFIX):])
    except ValueError as err:
        raise InvalidChecksum(f"Invalid base58check in {text!r}: {err}") from err

    if len(decoded) == 0:
        raise IllegalDecodedLength(f"Chain address {text!r} has no version byte")

    version, payload = decoded[0], decoded[1:]
    if version != CHAIN_ADDRESS_VERSION:
        raise IllegalVersion(f"Illegal chain address version {version} in {text!r}")
    if len(payload) < ADDRESS_LENGTH:
        raise IllegalDecodedLength(
            f"Chain address {text!r} decodes to {len(payload)} bytes,"
            f" at least {ADDRESS_LENGTH} are needed"
        )

    chain_id_bytes, address = payload[:-ADDRESS_LENGTH], payload[-ADDRESS_LENGTH:]
    if chain_id_bytes != expected_chain_id_bytes:
        raise IllegalChainID(
            f"Chain address {text!r} is for chain {encode_hex(chain_id_bytes)},"
            f" expected {encode_hex(expected_chain_id_bytes)}"
        )

    return Address(address)


def convert_address(text: str, chain_id: int) -> Tuple[Address, str]:
    """
    Accept either a hex address or a chain address and return both forms as
    ``(address, chain_address)``.
    """
    chain_id_bytes = chain_id_to_bytes(chain_id)

    if is_hex_address(text):
        address = parse_hex_address(text)
        return address, encode_chain_address(chain_id_bytes, address)

    address = decode_chain_address(text, chain_id_bytes)
    logger.debug("Converted %s to %s", text, encode_hex(address))
    return address, text
