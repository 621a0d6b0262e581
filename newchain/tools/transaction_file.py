import json
import logging
from pathlib import (
    Path,
)
from typing import (
    Any,
    Dict,
    NamedTuple,
    Optional,
    Union,
)

from eth_typing import (
    Address,
)
from eth_utils import (
    ValidationError,
    decode_hex,
    encode_hex,
    to_checksum_address,
)

from newchain._utils.address import (
    parse_hex_address,
)
from newchain._utils.transactions import (
    sign_transaction_with_keystore,
)
from newchain._utils.units import (
    to_base_units,
    to_decimal_string,
)
from newchain.abc import (
    KeyStoreAPI,
    SignedTransactionAPI,
    UnsignedTransactionAPI,
)
from newchain.codec import (
    TransactionBuilder,
)
from newchain.constants import (
    CREATE_CONTRACT_ADDRESS,
    DEFAULT_CHAIN_ID,
    ETHER_UNIT,
)
from newchain.exceptions import (
    MalformedEncoding,
)
from newchain.validation import (
    validate_chain_id,
)

logger = logging.getLogger("newchain.tools.transaction_file")

PathLike = Union[str, Path]


def _get_field(document: Dict[str, Any], key: str, default: Any) -> Any:
    # only a missing or null field takes the default, never a falsy one
    value = document.get(key)
    return default if value is None else value


class TransactionDocument(NamedTuple):
    """
    An unsigned transaction as written to disk between the offline ``build``
    and ``sign`` steps. ``value`` is held in base units and written as decimal
    text in ``unit``. A document with ``gas_tips`` builds a dynamic fee
    transaction, with ``gas_price`` as its fee cap.
    """

    sender: Address
    to: Optional[Address]
    value: int
    unit: str = ETHER_UNIT
    data: bytes = b""
    nonce: int = 0
    gas_price: int = 0
    gas: int = 0
    network_id: int = DEFAULT_CHAIN_ID
    gas_tips: Optional[int] = None

    @classmethod
    def from_json(cls, document: Dict[str, Any]) -> "TransactionDocument":
        unit = _get_field(document, "unit", ETHER_UNIT)
        to = document.get("to")
        gas_tips = document.get("gasTips")

        return cls(
            sender=parse_hex_address(document["from"]),
            to=parse_hex_address(to) if to is not None else None,
            value=to_base_units(str(_get_field(document, "value", "0")), unit),
            unit=unit,
            data=decode_hex(_get_field(document, "data", "0x")),
            nonce=int(_get_field(document, "nonce", 0)),
            gas_price=int(_get_field(document, "gasPrice", 0)),
            gas=int(_get_field(document, "gas", 0)),
            network_id=int(_get_field(document, "networkID", DEFAULT_CHAIN_ID)),
            gas_tips=int(gas_tips) if gas_tips is not None else None,
        )

    def to_json(self) -> Dict[str, Any]:
        document = {
            "from": to_checksum_address(self.sender),
            "to": to_checksum_address(self.to) if self.to else None,
            "value": to_decimal_string(self.value, self.unit),
            "unit": self.unit,
            "data": encode_hex(self.data),
            "nonce": self.nonce,
            "gasPrice": self.gas_price,
            "gas": self.gas,
            "networkID": self.network_id,
        }
        if self.gas_tips is not None:
            document["gasTips"] = self.gas_tips
        return document

    @classmethod
    def load(cls, path: PathLike) -> "TransactionDocument":
        with open(path) as document_file:
            document = json.load(document_file)
        logger.debug("Loaded transaction document from %s", path)
        return cls.from_json(document)

    def save(self, path: PathLike) -> None:
        with open(path, "w") as document_file:
            json.dump(self.to_json(), document_file, indent=1)
            document_file.write("\n")
        logger.debug("Saved transaction document to %s", path)

    def to_unsigned_transaction(self) -> UnsignedTransactionAPI:
        validate_chain_id(self.network_id)
        to = self.to if self.to is not None else CREATE_CONTRACT_ADDRESS

        if self.gas_tips is None:
            return TransactionBuilder.new_unsigned_legacy_transaction(
                nonce=self.nonce,
                gas_price=self.gas_price,
                gas=self.gas,
                to=to,
                value=self.value,
                data=self.data,
            )
        elif self.gas_tips > self.gas_price:
            raise ValidationError(
                f"Gas tips {self.gas_tips} exceed the gas price {self.gas_price}"
            )
        else:
            return TransactionBuilder.new_unsigned_dynamic_fee_transaction(
                chain_id=self.network_id,
                nonce=self.nonce,
                max_priority_fee_per_gas=self.gas_tips,
                max_fee_per_gas=self.gas_price,
                gas=self.gas,
                to=to,
                value=self.value,
                data=self.data,
                access_list=(),
            )

    def sign_with_keystore(self, keystore: KeyStoreAPI) -> SignedTransactionAPI:
        return sign_transaction_with_keystore(
            self.to_unsigned_transaction(),
            keystore,
            self.sender,
            chain_id=self.network_id,
        )


def save_signed_transaction_hex(
    transaction: SignedTransactionAPI, path: PathLike
) -> None:
    """
    Write the encoded transaction as a single line of hex, without ``0x``.
    """
    with open(path, "w") as hex_file:
        hex_file.write(transaction.encode().hex() + "\n")
    logger.debug("Saved signed transaction %s to %s", encode_hex(transaction.hash), path)


def load_signed_transaction_hex(path: PathLike) -> bytes:
    """
    Read the first non-blank line of ``path`` as the hex of an encoded
    transaction.
    """
    with open(path) as hex_file:
        for line in hex_file:
            text = line.strip()
            if text:
                break
        else:
            raise MalformedEncoding(f"No signed transaction found in {path}")

    try:
        return decode_hex(text)
    except ValueError as err:
        raise MalformedEncoding(f"Signed transaction in {path} is not hex: {err}") from err
