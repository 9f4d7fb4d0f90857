import logging
import cbor2
from fastapi import APIRouter, HTTPException  # type: ignore
from blockfrost import ApiError
from pycardano import Address, NativeScript, TransactionOutput
from pycardano.exception import PyCardanoException

from txout_app.builders import TransactionOutputBuilder
from txout_app.schemas.transaction_output import TransactionOutputSchema, TransactionOutputOut
from txout_app.schemas.transaction_output_asset import TransactionAssetSchema
from txout_app.utils.cardano import (
    DatumOption, dict_to_datum, get_coins_per_utxo_byte, min_ada_required, value_from_units,
)
from txout_app.utils.errors import MinAdaError, OutputBuilderError

logger = logging.getLogger(__name__)

router = APIRouter()


def output_assets(output: TransactionOutput) -> list:
    assets = [TransactionAssetSchema(unit="lovelace", quantity=str(output.amount.coin))]
    if output.amount.multi_asset:
        for policy_id, policy_assets in output.amount.multi_asset.items():
            for asset_name, qty in policy_assets.items():
                unit = policy_id.to_primitive().hex() + asset_name.to_primitive().hex()
                assets.append(TransactionAssetSchema(unit=unit, quantity=str(qty)))
    return assets


@router.post("/",
    response_model=TransactionOutputOut,
    summary="Build a transaction output",
    description="Builds a single transaction output from an address, a list of assets and an optional datum. "
                "Unless disabled, the lovelace amount is raised to the minimum the output needs for its size.",
    responses={
        400: {"description": "Invalid address, asset unit, datum or reference script"},
        422: {"description": "Minimum lovelace could not be evaluated"},
        502: {"description": "Protocol parameters could not be fetched from Blockfrost"},
    }
    )
def build_output(data: TransactionOutputSchema):
    try:
        address = Address.from_primitive(data.address)
    except (PyCardanoException, ValueError, TypeError) as e:
        raise HTTPException(status_code=400, detail=f"Invalid address '{data.address}': {e}")

    builder = TransactionOutputBuilder().with_address(address)

    try:
        value = value_from_units((asset.unit, asset.quantity) for asset in data.assets)

        if data.datum is not None:
            datum = dict_to_datum(data.datum)
            if data.datum_mode == "hash":
                builder = builder.with_communication_data(datum)
            else:
                builder = builder.with_data(DatumOption.inline(datum))

        if data.reference_script:
            builder = builder.with_reference_script(NativeScript.from_cbor(data.reference_script))

        if data.coins_per_utxo_byte is not None:
            coins_per_utxo_byte = data.coins_per_utxo_byte
        else:
            coins_per_utxo_byte = get_coins_per_utxo_byte()

        amount_builder = builder.advance().with_value(value)
        if data.min_required_coin:
            amount_builder = amount_builder.with_asset_and_min_required_coin(value.multi_asset, coins_per_utxo_byte)
            if value.coin > amount_builder.amount.coin:
                amount_builder = amount_builder.with_value(value)
            else:
                logger.debug(f"Raised lovelace of output to {amount_builder.amount.coin}")

        result = amount_builder.build()
        output = result.output()
        min_ada = min_ada_required(output, coins_per_utxo_byte)

    except MinAdaError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except (OutputBuilderError, PyCardanoException, cbor2.CBORDecodeError, TypeError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ApiError as e:
        logger.error(f"Blockfrost API error: {e}")
        raise HTTPException(status_code=502, detail=f"Blockfrost API error: {e}")

    communication_datum = result.communication_datum()

    return TransactionOutputOut(
        output_cbor=output.to_cbor_hex(),
        coin=output.amount.coin,
        assets=output_assets(output),
        datum_hash=output.datum_hash.to_primitive().hex() if output.datum_hash else None,
        communication_datum_cbor=communication_datum.to_cbor_hex() if communication_datum is not None else None,
        min_ada=min_ada,
    )
