from abc import (
    ABC,
    abstractmethod,
)
from typing import (
    Any,
    Dict,
    Optional,
    Sequence,
    Tuple,
    Type,
    TypeVar,
)

from eth_keys.datatypes import (
    PrivateKey,
)
from eth_typing import (
    Address,
    Hash32,
)

from newchain.typing import (
    BlockRef,
)

T = TypeVar("T")


class ConfigurableAPI(ABC):
    """
    A class providing inline subclassing.
    """

    @classmethod
    @abstractmethod
    def configure(cls: Type[T], __name__: str = None, **overrides: Any) -> Type[T]:
        ...


class TransactionFieldsAPI(ABC):
    """
    A class to define all common transaction fields.

    Every variant declares a ``type_id``: ``0`` for legacy transactions, and the
    EIP-2718 type byte for typed transactions.
    """

    type_id: int

    @property
    @abstractmethod
    def nonce(self) -> int:
        ...

    @property
    @abstractmethod
    def gas_price(self) -> int:
        """
        Will raise :class:`AttributeError` if get or set on a dynamic fee transaction.
        """
        ...

    @property
    @abstractmethod
    def max_fee_per_gas(self) -> int:
        """
        Will default to gas_price if this is not a dynamic fee transaction.
        """
        ...

    @property
    @abstractmethod
    def max_priority_fee_per_gas(self) -> int:
        """
        Will default to gas_price if this is not a dynamic fee transaction.
        """
        ...

    @property
    @abstractmethod
    def gas(self) -> int:
        ...

    @property
    @abstractmethod
    def to(self) -> Address:
        """
        The recipient, or the empty byte string for contract creation.
        """
        ...

    @property
    @abstractmethod
    def value(self) -> int:
        ...

    @property
    @abstractmethod
    def data(self) -> bytes:
        ...

    @property
    @abstractmethod
    def chain_id(self) -> Optional[int]:
        """
        The chain id the transaction is bound to, or ``None`` for a legacy
        transaction without replay protection.
        """
        ...

    @property
    @abstractmethod
    def access_list(self) -> Sequence[Tuple[Address, Sequence[int]]]:
        """
        Empty for legacy transactions.
        """
        ...


class BaseTransactionAPI(TransactionFieldsAPI):
    """
    Behavior shared by signed and unsigned transactions.
    """

    @abstractmethod
    def validate(self) -> None:
        """
        Validate the field values, raising :class:`eth_utils.ValidationError`.
        """
        ...

    @abstractmethod
    def encode(self) -> bytes:
        """
        Return the canonical encoding: a bare rlp list for legacy transactions,
        the type byte followed by an rlp list for typed transactions.
        """
        ...

    @property
    @abstractmethod
    def hash(self) -> Hash32:
        """
        Return the keccak hash of :meth:`encode`.
        """
        ...

    @abstractmethod
    def get_message_for_signing(self, chain_id: int = None) -> bytes:
        """
        Return the bytestring whose keccak is signed.
        """
        ...

    @abstractmethod
    def copy(self: T, **overrides: Any) -> T:
        ...


class UnsignedTransactionAPI(BaseTransactionAPI):
    """
    A class representing a transaction before it is signed.
    """

    @abstractmethod
    def as_signed_transaction(
        self, private_key: PrivateKey, chain_id: int = None
    ) -> "SignedTransactionAPI":
        """
        Return a version of this transaction which has been signed using the
        provided `private_key`
        """
        ...

    @abstractmethod
    def with_signature(self, v: int, r: int, s: int) -> "SignedTransactionAPI":
        """
        Attach a signature produced elsewhere. ``v`` must already follow the
        convention of this transaction type.
        """
        ...


class SignedTransactionAPI(BaseTransactionAPI):
    """
    A signed transaction. The sender is never stored, it is always recovered
    from the signature.
    """

    @property
    @abstractmethod
    def y_parity(self) -> int:
        """
        The recovery id, 0 or 1, regardless of how ``v`` is encoded.
        """
        ...

    @property
    @abstractmethod
    def r(self) -> int:
        ...

    @property
    @abstractmethod
    def s(self) -> int:
        ...

    @property
    @abstractmethod
    def sender(self) -> Address:
        """
        Convenience and performance property for the return value of `get_sender`
        """
        ...

    @abstractmethod
    def get_sender(self) -> Address:
        """
        Recover the address of the account that signed the transaction.
        """
        ...

    @abstractmethod
    def check_signature_validity(self) -> None:
        """
        Raise :class:`~newchain.exceptions.InvalidSignatureValues` if no public
        key can be recovered from the signature.
        """
        ...

    @property
    @abstractmethod
    def is_signature_valid(self) -> bool:
        ...

    @abstractmethod
    def as_unsigned_transaction(self) -> UnsignedTransactionAPI:
        ...


class TransactionBuilderAPI(ABC):
    """
    Responsible for encoding and decoding transactions of ambiguous type.
    """

    @classmethod
    @abstractmethod
    def decode(cls, encoded: bytes) -> BaseTransactionAPI:
        """
        Decode a legacy rlp list or a type byte followed by its payload, signed
        or unsigned.
        """
        ...

    @classmethod
    @abstractmethod
    def encode(cls, transaction: BaseTransactionAPI) -> bytes:
        ...


class BlockHeaderAPI(ABC):
    """
    The fields of a block header that are hashed for proof-of-authority sealing.
    """

    parent_hash: Hash32
    uncles_hash: Hash32
    coinbase: Address
    state_root: Hash32
    transaction_root: Hash32
    receipt_root: Hash32
    bloom: int
    difficulty: int
    block_number: int
    gas_limit: int
    gas_used: int
    timestamp: int
    extra_data: bytes
    mix_hash: Hash32
    nonce: bytes

    @property
    @abstractmethod
    def hash(self) -> Hash32:
        ...

    @abstractmethod
    def copy(self: T, **overrides: Any) -> T:
        ...


class KeyStoreAPI(ABC):
    """
    Holds private keys, usually encrypted at rest. A key must be unlocked
    before it can sign.
    """

    @abstractmethod
    def unlock(self, address: Address, passphrase: str) -> bool:
        """
        Return ``True`` if the passphrase unlocked the key for ``address``.
        """
        ...

    @abstractmethod
    def sign(self, address: Address, digest: Hash32) -> bytes:
        """
        Sign a 32 byte digest, returning the 65 byte ``r || s || recovery_id``
        signature. The recovery id carries no legacy offset.
        """
        ...


class ChainClientAPI(ABC):
    """
    The JSON-RPC surface of a node that this library hands data to.
    """

    @abstractmethod
    def send_raw_transaction(self, raw_transaction: bytes) -> Hash32:
        ...

    @abstractmethod
    def get_balance(self, address: Address, block_ref: BlockRef = "latest") -> int:
        ...

    @abstractmethod
    def get_transaction_receipt(
        self, transaction_hash: Hash32
    ) -> Optional[Dict[str, Any]]:
        ...

    @abstractmethod
    def estimate_gas(self, transaction: Dict[str, Any]) -> int:
        ...
