from eth_utils import (
    decode_hex,
)

# Fixed number of extra-data suffix bytes reserved for signer seal
from newchain.constants import (  # noqa: F401
    SIGNATURE_LENGTH,
)


# Fixed number of extra-data prefix bytes reserved for signer vanity
VANITY_LENGTH = 32

# Magic nonce number to vote on adding a new signer
NONCE_AUTH = decode_hex("0xffffffffffffffff")

# Magic nonce number to vote on removing a signer.
NONCE_DROP = decode_hex("0x0000000000000000")
