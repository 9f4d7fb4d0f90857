import os
from dotenv import load_dotenv

load_dotenv()

class Settings:

    BLOCKFROST_PROJECT_ID = os.getenv("BLOCKFROST_PROJECT_ID")
    NETWORK = os.getenv("network", "mainnet")

    # Babbage-era mainnet value, used when no Blockfrost project is configured
    COINS_PER_UTXO_BYTE = int(os.getenv("COINS_PER_UTXO_BYTE", "4310"))

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

settings = Settings()
