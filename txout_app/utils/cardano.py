import logging
from copy import deepcopy
from dataclasses import dataclass
from types import SimpleNamespace
from typing import Any, Iterable, Optional, Tuple

import cbor2
from blockfrost import ApiUrls
from pycardano import (
    Address, Asset, AssetName, BlockFrostChainContext, MultiAsset, ScriptHash,
    TransactionOutput, Value, datum_hash, min_lovelace_post_alonzo,
)
from pycardano.exception import PyCardanoException
from pycardano.plutus import RawPlutusData

from txout_app.core.config import settings
from txout_app.utils.errors import InvalidAmountError, InvalidUnitError, MinAdaError

logger = logging.getLogger(__name__)

POLICY_ID_HEX_LENGTH = 56
MAX_ASSET_NAME_HEX_LENGTH = 64
MAX_COIN = 2**64 - 1


@dataclass(frozen=True)
class DatumOption:
    """Datum carried by an output: either the datum itself or its hash."""

    kind: str
    value: Any

    HASH = "hash"
    INLINE = "inline"

    @classmethod
    def from_hash(cls, digest) -> "DatumOption":
        return cls(cls.HASH, digest)

    @classmethod
    def inline(cls, payload) -> "DatumOption":
        return cls(cls.INLINE, payload)

    @property
    def is_hash(self) -> bool:
        return self.kind == self.HASH

    @property
    def is_inline(self) -> bool:
        return self.kind == self.INLINE


def hash_datum(payload):
    return datum_hash(payload)


def assemble_output(address: Address, value: Value, datum: Optional[DatumOption] = None, script_ref=None) -> TransactionOutput:
    """Create a post-Alonzo transaction output.

    Every field is copied, so the returned record shares nothing mutable
    with the arguments.
    """
    output_datum_hash = None
    inline_datum = None
    if datum is not None:
        if datum.is_hash:
            output_datum_hash = deepcopy(datum.value)
        else:
            inline_datum = deepcopy(datum.value)

    return TransactionOutput(
        deepcopy(address),
        deepcopy(value),
        datum_hash=output_datum_hash,
        datum=inline_datum,
        script=deepcopy(script_ref),
        post_alonzo=True,
    )


def min_ada_required(output: TransactionOutput, coins_per_utxo_byte: int) -> int:
    """Minimum lovelace ``output`` must hold for its serialized size."""
    if isinstance(coins_per_utxo_byte, bool) or not isinstance(coins_per_utxo_byte, int):
        raise MinAdaError(f"coins_per_utxo_byte must be an integer, got {type(coins_per_utxo_byte).__name__}")
    if coins_per_utxo_byte < 0:
        raise MinAdaError(f"coins_per_utxo_byte must not be negative, got {coins_per_utxo_byte}")

    # min_lovelace_post_alonzo only reads protocol_param.coins_per_utxo_byte
    context = SimpleNamespace(protocol_param=SimpleNamespace(coins_per_utxo_byte=coins_per_utxo_byte))

    try:
        # the rule bumps a zero coin to 1 ADA in place, so work on a copy
        required = min_lovelace_post_alonzo(deepcopy(output), context)
    except (PyCardanoException, cbor2.CBOREncodeError, TypeError, ValueError, AttributeError) as e:
        raise MinAdaError(f"Unable to evaluate min ADA for output: {e}") from e

    if required > MAX_COIN:
        raise MinAdaError(f"Min ADA {required} overflows the coin range")

    return required


def check_value_range(value: Value):
    """Coin and every asset quantity must fit an unsigned 64-bit integer."""
    if not 0 <= value.coin <= MAX_COIN:
        raise InvalidAmountError(f"Coin {value.coin} is outside 0..{MAX_COIN}")
    if value.multi_asset:
        for policy_id, policy_assets in value.multi_asset.items():
            for asset_name, qty in policy_assets.items():
                if not 0 <= qty <= MAX_COIN:
                    raise InvalidAmountError(f"Quantity {qty} of asset {asset_name} under policy {policy_id} is outside 0..{MAX_COIN}")


def parse_unit(unit: str) -> Tuple[ScriptHash, AssetName]:
    """Split a Blockfrost unit (policy id hex + asset name hex)."""
    if unit == "lovelace":
        raise InvalidUnitError("lovelace is not a native asset unit")

    policy_id = unit[:POLICY_ID_HEX_LENGTH]
    asset_name_hex = unit[POLICY_ID_HEX_LENGTH:]
    if len(policy_id) != POLICY_ID_HEX_LENGTH:
        raise InvalidUnitError(f"Unit '{unit}' is shorter than a policy id")
    if len(asset_name_hex) > MAX_ASSET_NAME_HEX_LENGTH:
        raise InvalidUnitError(f"Asset name of unit '{unit}' is longer than 32 bytes")

    try:
        policy = ScriptHash.from_primitive(policy_id)
        asset_name = AssetName(bytes.fromhex(asset_name_hex))
    except (ValueError, PyCardanoException) as e:
        raise InvalidUnitError(f"Unit '{unit}' is not valid hex: {e}") from e

    return policy, asset_name


def value_from_units(assets: Iterable[Tuple[str, int]]) -> Value:
    val = Value(0)
    ma = MultiAsset()

    for unit, quantity in assets:
        try:
            quantity = int(quantity)
        except (TypeError, ValueError) as e:
            raise InvalidUnitError(f"Quantity of '{unit}' is not an integer: {quantity}") from e

        if quantity < 0:
            raise InvalidUnitError(f"Quantity of '{unit}' must not be negative")
        if quantity > MAX_COIN:
            raise InvalidUnitError(f"Quantity of '{unit}' exceeds {MAX_COIN}")

        if unit == "lovelace":
            val.coin += quantity
            if val.coin > MAX_COIN:
                raise InvalidUnitError(f"Total lovelace exceeds {MAX_COIN}")
        else:
            policy, asset_name = parse_unit(unit)
            if policy not in ma:
                ma[policy] = Asset()
            if asset_name not in ma[policy]:
                ma[policy][asset_name] = 0
            ma[policy][asset_name] += quantity
            if ma[policy][asset_name] > MAX_COIN:
                raise InvalidUnitError(f"Total quantity of '{unit}' exceeds {MAX_COIN}")

    if ma:
        val.multi_asset = ma

    return val


def dict_to_datum(obj: dict) -> RawPlutusData:
    def convert(o):
        if isinstance(o, dict):
            return {convert(k): convert(v) for k, v in o.items()}
        elif isinstance(o, list):
            return [convert(i) for i in o]
        elif isinstance(o, str):
            return o.encode("utf-8")
        elif isinstance(o, (int, bytes)):
            return o
        else:
            raise TypeError(f"Unsupported type in datum: {type(o)}")

    fields = dict(obj)
    version = fields.pop("version", 1)
    if isinstance(version, str):
        try:
            version = int(version)
        except ValueError:
            logger.warning(f"Invalid version format in datum: {version}, defaulting to 1")
            version = 1
    if not isinstance(version, int) or isinstance(version, bool) or version < 1:
        logger.warning(f"Invalid version in datum: {version}, defaulting to 1")
        version = 1

    return RawPlutusData(cbor2.CBORTag(121, [convert(fields), version]))


def blockfrost_base_url() -> str:
    network = settings.NETWORK.lower()
    return ApiUrls.preprod.value if network == "preprod" else ApiUrls.preview.value if network == "preview" else ApiUrls.mainnet.value


def get_coins_per_utxo_byte() -> int:
    if not settings.BLOCKFROST_PROJECT_ID:
        return settings.COINS_PER_UTXO_BYTE

    context = BlockFrostChainContext(
        project_id=settings.BLOCKFROST_PROJECT_ID,
        base_url=blockfrost_base_url(),
    )
    coins_per_utxo_byte = context.protocol_param.coins_per_utxo_byte
    logger.debug(f"coins_per_utxo_byte from Blockfrost: {coins_per_utxo_byte}")
    return coins_per_utxo_byte
