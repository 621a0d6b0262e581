class NewChainError(Exception):
    """
    Base class for all py-newchain errors.
    """


class InvalidChainId(NewChainError, ValueError):
    """
    Raised when a configured chain id is not a positive integer of at most 8 bytes.
    This is a configuration problem, raised before any transaction is built.
    """


#
# Transaction decoding
#
class TransactionDecodingError(NewChainError):
    """
    Base class for failures to decode a raw transaction. These are never
    transient and must not be retried.
    """


class MalformedEncoding(TransactionDecodingError):
    """
    Raised when the encoded transaction is structurally broken: not valid rlp,
    trailing bytes, a wrong number of fields or a non-canonical field value.
    """


class TruncatedField(TransactionDecodingError):
    """
    Raised when an rlp item declares more bytes than are available.
    """


class UnsupportedTransactionType(TransactionDecodingError):
    """
    Raised when an encoded transaction starts with a type byte in the EIP-2718
    range [0, 0x7f] that is not one of the recognized transaction types.
    """

    @property
    def type_int(self) -> int:
        return self.args[0]


#
# Signatures
#
class SignatureError(NewChainError):
    """
    Base class for signature and recovery errors.
    """


class InvalidSignatureValues(SignatureError):
    """
    Raised when r, s or the recovery id are out of range, or when no public
    key can be recovered from them.
    """


class SenderMismatch(SignatureError):
    """
    Raised when the sender recovered from a signed transaction differs from the
    claimed sender. This indicates tampering or a signing bug and is fatal.
    """

    @property
    def claimed(self) -> bytes:
        return self.args[1]

    @property
    def recovered(self) -> bytes:
        return self.args[2]


class MissingSignatureSuffix(SignatureError):
    """
    Raised when a block header's extra data is too short to carry a signature.
    """


#
# Addresses
#
class AddressError(NewChainError):
    """
    Base class for address parsing errors.
    """


class InvalidHexAddress(AddressError):
    """
    Raised when a string is not a 40 character hex address.
    """


class ChainAddressError(AddressError):
    """
    Base class for errors decoding a ``NEW`` chain address.
    """


class NotChainAddress(ChainAddressError):
    pass


class InvalidChecksum(ChainAddressError):
    pass


class IllegalVersion(ChainAddressError):
    pass


class IllegalDecodedLength(ChainAddressError):
    pass


class IllegalChainID(ChainAddressError):
    pass


#
# Amounts
#
class AmountError(NewChainError):
    """
    Base class for amount conversion errors.
    """


class TooManyDecimals(AmountError):
    pass


class IllegalUnit(AmountError):
    pass


class NumericParseError(AmountError):
    pass


#
# Batch payments
#
class BatchError(NewChainError):
    """
    Base class for errors building a batch of payments.
    """


class BatchFileError(BatchError):
    """
    Raised when a line of a batch file is not an ``address,amount`` pair.
    """

    @property
    def line_number(self) -> int:
        return self.args[1]


class InsufficientFunds(BatchError):
    """
    Raised when the sender's balance cannot cover the batch value plus gas.
    """

    @property
    def balance(self) -> int:
        return self.args[1]

    @property
    def required(self) -> int:
        return self.args[2]
