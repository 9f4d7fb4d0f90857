from pydantic import BaseModel

class TransactionAssetSchema(BaseModel):
    unit: str  # e.g. "lovelace", or policy id hex + asset name hex
    quantity: str  # String to support large values
