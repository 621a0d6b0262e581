import logging
from pathlib import (
    Path,
)
from typing import (
    Iterable,
    NamedTuple,
    Optional,
    Tuple,
    Union,
)

from eth_typing import (
    Address,
)
from eth_utils import (
    encode_hex,
    to_checksum_address,
)

from newchain._utils.address import (
    convert_address,
)
from newchain._utils.transactions import (
    sign_transaction_with_keystore,
)
from newchain._utils.units import (
    to_base_units,
)
from newchain.abc import (
    ChainClientAPI,
    KeyStoreAPI,
    SignedTransactionAPI,
    UnsignedTransactionAPI,
)
from newchain.codec import (
    TransactionBuilder,
)
from newchain.constants import (
    ETHER_UNIT,
    ZERO_ADDRESS,
)
from newchain.exceptions import (
    AddressError,
    AmountError,
    BatchError,
    BatchFileError,
    InsufficientFunds,
)
from newchain.typing import (
    BlockRef,
)

logger = logging.getLogger("newchain.tools.batch")

PathLike = Union[str, Path]


class BatchPayment(NamedTuple):
    to: Address
    value: int
    line_number: int


class BatchPlan(NamedTuple):
    """
    Unsigned transactions with consecutive nonces, all from ``sender``.
    """

    sender: Address
    transactions: Tuple[UnsignedTransactionAPI, ...]
    total_value: int
    total_gas_cost: int

    @property
    def total_cost(self) -> int:
        return self.total_value + self.total_gas_cost


def parse_batch_lines(
    lines: Iterable[str], chain_id: int, unit: str = ETHER_UNIT
) -> Tuple[BatchPayment, ...]:
    """
    Parse ``address,amount`` lines. The address may be hex or a chain address
    for ``chain_id``, the amount is decimal text in ``unit``. Blank lines are
    skipped.
    """
    payments = []
    for line_number, line in enumerate(lines, start=1):
        text = line.strip()
        if not text:
            continue

        parts = text.split(",")
        if len(parts) != 2:
            raise BatchFileError(
                f"Line {line_number} is not an address,amount pair: {text!r}",
                line_number,
            )
        address_text, amount_text = (part.strip() for part in parts)

        try:
            to, _ = convert_address(address_text, chain_id)
            value = to_base_units(amount_text, unit)
        except (AddressError, AmountError) as err:
            raise BatchFileError(f"Line {line_number}: {err}", line_number) from err

        if to == ZERO_ADDRESS:
            logger.warning("Line %d pays the zero address", line_number)
        payments.append(BatchPayment(to, value, line_number))

    return tuple(payments)


def load_batch_file(
    path: PathLike, chain_id: int, unit: str = ETHER_UNIT
) -> Tuple[BatchPayment, ...]:
    with open(path) as batch_file:
        payments = parse_batch_lines(batch_file, chain_id, unit)
    logger.debug("Loaded %d payments from %s", len(payments), path)
    return payments


def build_batch_transactions(
    payments: Iterable[BatchPayment],
    sender: Address,
    start_nonce: int,
    gas_price: int,
    gas: Optional[int] = None,
    data: bytes = b"",
    client: ChainClientAPI = None,
) -> BatchPlan:
    """
    Build one legacy transaction per payment, with nonces counting up from
    ``start_nonce``. Without ``gas``, the limit is estimated once by ``client``
    for the first payment and used for all of them.
    """
    transactions = []
    total_value = 0
    total_gas_cost = 0

    for nonce, payment in enumerate(payments, start=start_nonce):
        if gas is None:
            if client is None:
                raise BatchError("A client is needed to estimate the gas limit")
            gas = client.estimate_gas({
                "from": to_checksum_address(sender),
                "to": to_checksum_address(payment.to),
                "value": payment.value,
                "data": encode_hex(data),
            })
            logger.debug("Estimated a gas limit of %d per payment", gas)

        transactions.append(
            TransactionBuilder.new_unsigned_legacy_transaction(
                nonce=nonce,
                gas_price=gas_price,
                gas=gas,
                to=payment.to,
                value=payment.value,
                data=data,
            )
        )
        total_value += payment.value
        total_gas_cost += gas_price * gas

    return BatchPlan(sender, tuple(transactions), total_value, total_gas_cost)


def check_batch_balance(
    client: ChainClientAPI, plan: BatchPlan, block_ref: BlockRef = "pending"
) -> int:
    """
    Return the sender's balance if it covers every payment and its gas.
    """
    if plan.total_value <= 0:
        raise BatchError("Total pay amount is zero")

    balance = client.get_balance(plan.sender, block_ref)
    if balance < plan.total_cost:
        raise InsufficientFunds(
            f"Balance {balance} of {to_checksum_address(plan.sender)} does not cover"
            f" {plan.total_cost}",
            balance,
            plan.total_cost,
        )
    return balance


def sign_batch(
    plan: BatchPlan, keystore: KeyStoreAPI, chain_id: int
) -> Tuple[SignedTransactionAPI, ...]:
    return tuple(
        sign_transaction_with_keystore(transaction, keystore, plan.sender, chain_id)
        for transaction in plan.transactions
    )
