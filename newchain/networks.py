from typing import (
    Any,
    Tuple,
    Type,
    TypeVar,
)

from eth_typing import (
    Address,
)

from newchain._utils.address import (
    chain_id_to_bytes,
    decode_chain_address,
    encode_chain_address,
)
from newchain._utils.datatypes import (
    Configurable,
)
from newchain._utils.units import (
    format_amount,
    to_base_units,
    to_decimal_string,
)
from newchain.codec import (
    TransactionBuilder,
)
from newchain.constants import (
    CHAIN_ADDRESS_PREFIX,
    ETHER_UNIT,
    ETHEREUM_MAINNET_CHAIN_ID,
    ETHEREUM_RPC_URL,
    ISAAC_UNIT,
    NEW_UNIT,
    NEWCHAIN_MAINNET_CHAIN_ID,
    NEWCHAIN_RPC_URL,
    NEWCHAIN_TESTNET_CHAIN_ID,
    WEI_UNIT,
)
from newchain.validation import (
    validate_chain_id,
)

TNetwork = TypeVar("TNetwork", bound="BaseNetwork")


class BaseNetwork(Configurable):
    """
    The settings of one chain. Networks are never instantiated, a new one is
    derived with :meth:`configure`.
    """

    chain_id: int = None
    display_unit: str = None
    base_unit: str = None
    chain_address_prefix: str = CHAIN_ADDRESS_PREFIX
    default_rpc_url: str = None

    @classmethod
    def configure(
        cls: Type[TNetwork], __name__: str = None, **overrides: Any
    ) -> Type[TNetwork]:
        if "chain_id" in overrides:
            validate_chain_id(overrides["chain_id"])
        return super().configure(__name__, **overrides)  # type: ignore

    @classmethod
    def get_chain_id_bytes(cls) -> bytes:
        return chain_id_to_bytes(cls.chain_id)

    @classmethod
    def units(cls) -> Tuple[str, str]:
        return cls.display_unit, cls.base_unit

    #
    # Chain addresses
    #
    @classmethod
    def encode_chain_address(cls, address: Address) -> str:
        return encode_chain_address(cls.get_chain_id_bytes(), address)

    @classmethod
    def decode_chain_address(cls, text: str) -> Address:
        return decode_chain_address(text, cls.get_chain_id_bytes())

    #
    # Amounts
    #
    @classmethod
    def to_base_units(cls, amount_text: str, unit: str = None) -> int:
        return to_base_units(amount_text, unit or cls.display_unit)

    @classmethod
    def to_decimal_string(cls, base_units: int, unit: str = None) -> str:
        return to_decimal_string(base_units, unit or cls.display_unit)

    @classmethod
    def format_amount(cls, base_units: int, unit: str = None) -> str:
        return format_amount(base_units, unit, units=cls.units())

    @classmethod
    def new_transaction_builder(cls) -> Type[TransactionBuilder]:
        return TransactionBuilder


NewChainMainnet = BaseNetwork.configure(
    __name__="NewChainMainnet",
    chain_id=NEWCHAIN_MAINNET_CHAIN_ID,
    display_unit=NEW_UNIT,
    base_unit=ISAAC_UNIT,
    default_rpc_url=NEWCHAIN_RPC_URL,
)

NewChainTestnet = BaseNetwork.configure(
    __name__="NewChainTestnet",
    chain_id=NEWCHAIN_TESTNET_CHAIN_ID,
    display_unit=NEW_UNIT,
    base_unit=ISAAC_UNIT,
    default_rpc_url=NEWCHAIN_RPC_URL,
)

EthereumMainnet = BaseNetwork.configure(
    __name__="EthereumMainnet",
    chain_id=ETHEREUM_MAINNET_CHAIN_ID,
    display_unit=ETHER_UNIT,
    base_unit=WEI_UNIT,
    default_rpc_url=ETHEREUM_RPC_URL,
)

DefaultNetwork = NewChainTestnet


NETWORKS = {
    network.chain_id: network
    for network in (NewChainMainnet, NewChainTestnet, EthereumMainnet)
}


def get_network(chain_id: int) -> Type[BaseNetwork]:
    """
    Return the predefined network for ``chain_id``, or configure an anonymous
    Ethereum-style network for it.
    """
    validate_chain_id(chain_id)
    try:
        return NETWORKS[chain_id]
    except KeyError:
        return EthereumMainnet.configure(
            __name__=f"Network{chain_id}",
            chain_id=chain_id,
            default_rpc_url=None,
        )
