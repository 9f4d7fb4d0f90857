from typing import List, Literal, Optional
from pydantic import BaseModel, Field
from txout_app.schemas.transaction_output_asset import TransactionAssetSchema

class TransactionOutputSchema(BaseModel):
    address: str
    assets: List[TransactionAssetSchema] = []
    datum: Optional[dict] = None
    datum_mode: Literal["inline", "hash"] = Field("inline", description="Embed the datum inline, or embed its hash and return the datum separately")
    reference_script: Optional[str] = Field(None, description="CBOR hex of a native script to attach as reference script")
    min_required_coin: bool = Field(True, description="Raise the lovelace amount to the minimum the output needs")
    coins_per_utxo_byte: Optional[int] = None

class TransactionOutputOut(BaseModel):
    output_cbor: str
    coin: int
    assets: List[TransactionAssetSchema]
    datum_hash: Optional[str] = None
    communication_datum_cbor: Optional[str] = None
    min_ada: int
