from typing import Optional

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    DATABASE_URL: str
    STORE_NAME: str = "Nanah Store"

    # Wallet provider (JSON-RPC endpoint accepting wallet_sendCalls)
    WALLET_RPC_URL: Optional[str] = None

    # Payments settle in USDC on Base mainnet
    PAYMENT_CHAIN_ID: int = 8453
    PAYMENT_TOKEN_ADDRESS: str = "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"
    PAYMENT_TOKEN_DECIMALS: int = 6
    PAYMENT_RECIPIENT: str = "0xd8da6bf26964af9d7eed9e03e53415d37aa96045"
    DATA_CALLBACK_URL: str = "https://nanah-store.vercel.app/api/data-validation"

    class Config:
        env_file = ".env"

settings = Settings()
