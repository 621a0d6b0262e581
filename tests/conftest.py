from eth_hash.auto import (
    keccak,
)
from eth_keys import (
    keys,
)
from eth_utils import (
    decode_hex,
    setup_DEBUG2_logging,
)
import pytest

from newchain.abc import (
    ChainClientAPI,
    KeyStoreAPI,
)

#
#  Setup DEBUG2 level logging.
#
setup_DEBUG2_logging()


@pytest.fixture
def funded_address_private_key():
    return keys.PrivateKey(
        decode_hex("0x45a915e4d060149eb4365960e6a7a45f334393093061116b197e3240065ff2d8")
    )


@pytest.fixture
def funded_address(funded_address_private_key):
    return funded_address_private_key.public_key.to_canonical_address()


@pytest.fixture
def other_private_key():
    return keys.PrivateKey(
        decode_hex("0x15a915e4d060149eb4365960e6a7a45f334393093061116b197e3240065ff2d8")
    )


class InMemoryKeyStore(KeyStoreAPI):
    """
    Plaintext keys, unlocked by a fixed passphrase.
    """

    def __init__(self, passphrase="secret"):
        self._passphrase = passphrase
        self._keys = {}
        self._unlocked = set()

    def add_key(self, private_key):
        address = private_key.public_key.to_canonical_address()
        self._keys[address] = private_key
        return address

    def unlock(self, address, passphrase):
        if address in self._keys and passphrase == self._passphrase:
            self._unlocked.add(address)
            return True
        return False

    def sign(self, address, digest):
        if address not in self._unlocked:
            raise PermissionError(f"Account {address.hex()} is locked")
        return self._keys[address].sign_msg_hash(digest).to_bytes()


class ImpersonatingKeyStore(InMemoryKeyStore):
    """
    Signs every request with one fixed key, whatever address is asked for.
    """

    def __init__(self, private_key):
        super().__init__()
        self._private_key = private_key

    def sign(self, address, digest):
        return self._private_key.sign_msg_hash(digest).to_bytes()


class RecordingChainClient(ChainClientAPI):
    def __init__(self, balance=0, gas_estimate=21000):
        self.sent = []
        self.balance_queries = []
        self.gas_queries = []
        self._balance = balance
        self._gas_estimate = gas_estimate

    def send_raw_transaction(self, raw_transaction):
        self.sent.append(raw_transaction)
        return keccak(raw_transaction)

    def get_balance(self, address, block_ref="latest"):
        self.balance_queries.append((address, block_ref))
        return self._balance

    def get_transaction_receipt(self, transaction_hash):
        return None

    def estimate_gas(self, transaction):
        self.gas_queries.append(transaction)
        return self._gas_estimate


@pytest.fixture
def keystore():
    return InMemoryKeyStore()


@pytest.fixture
def impersonating_keystore():
    return ImpersonatingKeyStore(
        keys.PrivateKey(decode_hex("0x" + "46" * 32))
    )


@pytest.fixture
def chain_client():
    return RecordingChainClient()


@pytest.fixture
def funded_chain_client():
    return RecordingChainClient(balance=10 ** 20, gas_estimate=25000)
