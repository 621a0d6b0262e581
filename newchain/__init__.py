from importlib.metadata import (
    version as __version,
)

from newchain.codec import (
    TransactionBuilder,
)
from newchain.networks import (
    DefaultNetwork,
    EthereumMainnet,
    NewChainMainnet,
    NewChainTestnet,
)


__version__ = __version("py-newchain")
