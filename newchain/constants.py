from eth_typing import (
    Address,
    Hash32,
)


#
# Integer bounds
#
UINT_64_MAX = 2**64 - 1
UINT_256_MAX = 2**256 - 1
UINT_256_CEILING = 2**256


#
# Secp256k1
#
SECPK1_N = 115792089237316195423570985008687907852837564279074904382605163141518161494337  # noqa: E501


#
# Addresses and hashes
#
CREATE_CONTRACT_ADDRESS = Address(b'')
ZERO_ADDRESS = Address(20 * b'\x00')
ZERO_HASH32 = Hash32(32 * b'\x00')
ADDRESS_LENGTH = 20
PUBLIC_KEY_LENGTH = 64
UNCOMPRESSED_PUBLIC_KEY_PREFIX = b'\x04'


#
# Transaction types
#
LEGACY_TRANSACTION_TYPE = 0
ACCESS_LIST_TRANSACTION_TYPE = 1
DYNAMIC_FEE_TRANSACTION_TYPE = 2

VALID_TRANSACTION_TYPES = {
    LEGACY_TRANSACTION_TYPE,
    ACCESS_LIST_TRANSACTION_TYPE,
    DYNAMIC_FEE_TRANSACTION_TYPE,
}

# First byte of an rlp list, anything at or above it is a legacy transaction
LEGACY_TRANSACTION_MIN_FIRST_BYTE = 0xc0
# EIP-2718 reserves [0x00, 0x7f] for type bytes
MAX_TRANSACTION_TYPE_BYTE = 0x7f

# Transactions nest lists at most three deep (access list entries), headers not at all
MAX_RLP_NESTING_DEPTH = 16


#
# Signatures
#
# Add this offset to y_parity to get "v" for unprotected legacy transactions
V_OFFSET = 27
EIP155_CHAIN_ID_OFFSET = 35

# 64 bytes ECDSA signature + 1 byte recovery id
SIGNATURE_LENGTH = 64 + 1

# Chain ids are carried as uint64 by clients
MAX_CHAIN_ID_BYTES = 8


#
# Chain addresses
#
CHAIN_ADDRESS_PREFIX = "NEW"
CHAIN_ADDRESS_VERSION = 0


#
# Units
#
DISPLAY_UNIT_DECIMALS = 18
ETHER_UNIT = "ETH"
WEI_UNIT = "WEI"
NEW_UNIT = "NEW"
ISAAC_UNIT = "ISAAC"


#
# Networks
#
NEWCHAIN_MAINNET_CHAIN_ID = 1012
NEWCHAIN_TESTNET_CHAIN_ID = 1007
ETHEREUM_MAINNET_CHAIN_ID = 1
DEFAULT_CHAIN_ID = NEWCHAIN_TESTNET_CHAIN_ID

NEWCHAIN_RPC_URL = "https://rpc1.newchain.newtonproject.org"
ETHEREUM_RPC_URL = "https://ethrpc.service.newtonproject.org"
