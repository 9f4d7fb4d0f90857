import logging
from copy import deepcopy
from dataclasses import dataclass, replace
from typing import Any, Optional, Union

from pycardano import Address, MultiAsset, TransactionOutput, Value

from txout_app.utils.cardano import (
    DatumOption, assemble_output, check_value_range, hash_datum, min_ada_required,
)
from txout_app.utils.errors import AddressMissing, AmountMissing

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawDatum:
    option: DatumOption


@dataclass(frozen=True)
class CommunicatedDatum:
    """Datum referenced by hash in the output, with the full payload kept
    for the witness set of the same transaction."""

    payload: Any
    option: DatumOption


DatumSlot = Union[None, RawDatum, CommunicatedDatum]


def _slot_datum(slot: DatumSlot) -> Optional[DatumOption]:
    return slot.option if slot is not None else None


def _slot_communication_datum(slot: DatumSlot):
    return slot.payload if isinstance(slot, CommunicatedDatum) else None


@dataclass(frozen=True)
class TransactionOutputBuilder:
    """First stage of building an output: address, datum and reference script.

    Every ``with_*`` call returns a new builder. Call ``advance()`` to move on
    to setting the value; it is the only place the address is checked.
    """

    address: Optional[Address] = None
    datum_slot: DatumSlot = None
    script_ref: Any = None

    @property
    def datum(self) -> Optional[DatumOption]:
        return _slot_datum(self.datum_slot)

    @property
    def communication_datum(self):
        return _slot_communication_datum(self.datum_slot)

    def with_address(self, address: Address) -> "TransactionOutputBuilder":
        return replace(self, address=deepcopy(address))

    def with_communication_data(self, datum) -> "TransactionOutputBuilder":
        payload = deepcopy(datum)
        option = DatumOption.from_hash(hash_datum(payload))
        return replace(self, datum_slot=CommunicatedDatum(payload, option))

    def with_data(self, datum: DatumOption) -> "TransactionOutputBuilder":
        return replace(self, datum_slot=RawDatum(datum))

    def with_reference_script(self, script_ref) -> "TransactionOutputBuilder":
        return replace(self, script_ref=deepcopy(script_ref))

    def advance(self) -> "TransactionOutputAmountBuilder":
        if self.address is None:
            raise AddressMissing("Address missing")

        return TransactionOutputAmountBuilder(
            address=self.address,
            datum_slot=self.datum_slot,
            script_ref=self.script_ref,
        )


@dataclass(frozen=True)
class TransactionOutputAmountBuilder:
    address: Address
    datum_slot: DatumSlot = None
    script_ref: Any = None
    amount: Optional[Value] = None

    @property
    def datum(self) -> Optional[DatumOption]:
        return _slot_datum(self.datum_slot)

    @property
    def communication_datum(self):
        return _slot_communication_datum(self.datum_slot)

    def with_value(self, amount: Value) -> "TransactionOutputAmountBuilder":
        check_value_range(amount)
        return replace(self, amount=deepcopy(amount))

    def with_asset_and_min_required_coin(self, multi_asset: MultiAsset, coins_per_utxo_byte: int) -> "TransactionOutputAmountBuilder":
        """Set ``multi_asset`` together with the least coin the output needs.

        The min ADA depends on the serialized size, which depends on the coin
        itself. The first pass sizes the output as it currently stands (the
        staged value, or an empty one), the second pass re-evaluates it with
        the target assets and the first estimate as coin. One refinement is
        enough as long as the coin's CBOR width is the only remaining
        dependency of the rule on the coin.
        """
        current = self.amount if self.amount is not None else Value(0, MultiAsset())
        min_output = assemble_output(self.address, current, self.datum, self.script_ref)
        min_possible_coin = min_ada_required(min_output, coins_per_utxo_byte)
        logger.debug(f"Min ADA estimate for current output: {min_possible_coin}")

        min_output.amount = Value(min_possible_coin, deepcopy(multi_asset))
        required_coin = min_ada_required(min_output, coins_per_utxo_byte)
        logger.debug(f"Min ADA required with target assets: {required_coin}")

        return self.with_value(Value(required_coin, multi_asset))

    def build(self) -> "SingleOutputBuilderResult":
        if self.amount is None:
            raise AmountMissing("Value missing")

        output = assemble_output(self.address, self.amount, self.datum, self.script_ref)
        return SingleOutputBuilderResult(output, self.communication_datum)


class SingleOutputBuilderResult:
    """A built output and, when its datum is given by hash, the datum itself."""

    def __init__(self, output: TransactionOutput, communication_datum=None):
        self._output = deepcopy(output)
        self._communication_datum = deepcopy(communication_datum)

    def set_communication_datum(self, datum):
        self._communication_datum = deepcopy(datum)

    def output(self) -> TransactionOutput:
        return deepcopy(self._output)

    def communication_datum(self):
        return deepcopy(self._communication_datum)
