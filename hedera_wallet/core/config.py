"""Wallet core configuration using pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Wallet core settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="HEDERA_WALLET_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    # Account that receives service fees when a request names none
    DEFAULT_FEE_COLLECTOR: str = "0.0.98"

    # Scheduled swaps expire this long after creation
    SWAP_EXPIRATION_SECONDS: int = 30 * 60

    # Mirror nodes
    MIRROR_NODE_URLS: dict[str, str] = {
        "mainnet": "https://mainnet-public.mirrornode.hedera.com",
        "testnet": "https://testnet.mirrornode.hedera.com",
        "previewnet": "https://previewnet.mirrornode.hedera.com",
    }
    MIRROR_TIMEOUT: float = 30.0

    # Explorer used for links in post-transaction dialogs
    HASHSCAN_URL: str = "https://hashscan.io"
    POST_TRANSACTION_DIALOG: bool = True

    LOG_LEVEL: str = "INFO"

    def mirror_node_url(self, network: str) -> str:
        """Get the public mirror node URL for a network."""
        return self.MIRROR_NODE_URLS.get(network, self.MIRROR_NODE_URLS["testnet"])


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
