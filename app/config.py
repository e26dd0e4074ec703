from pathlib import Path
from typing import Any, Dict, List

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parents[1]

DEFAULT_RPC_URLS: Dict[int, str] = {
    1: "https://ethereum.rpc.subquery.network/public",
    137: "https://polygon.rpc.subquery.network/public",
    42161: "https://arbitrum.rpc.subquery.network/public",
    8453: "https://base.rpc.subquery.network/public",
}


class ConfigurationError(RuntimeError):
    """Raised when the service cannot start with the current environment."""


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Server Settings
    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=3000, description="Server port")
    log_level: str = Field(default="INFO", description="Logging level")
    environment: str = Field(
        default="development",
        description="Deployment mode (development or production)",
        validation_alias=AliasChoices("environment", "node_env", "app_env"),
    )
    cors_allow_origins: List[str] = Field(default_factory=lambda: ["*"], description="Allowed CORS origins")

    # 1inch API
    oneinch_api_key: str = Field(
        default="",
        description="Bearer token for the 1inch developer portal",
        validation_alias=AliasChoices("oneinch_api_key", "one_inch_api_key"),
    )
    oneinch_base_url: str = Field(default="https://api.1inch.dev", description="1inch API base URL")

    # Upstream call policy
    request_timeout_seconds: int = Field(default=30, ge=1, description="Timeout for order lifecycle calls")
    token_list_timeout_seconds: int = Field(default=10, ge=1, description="Timeout for token list lookups")
    read_retry_attempts: int = Field(default=2, ge=0, description="Extra attempts for read-only calls on network failure")
    read_retry_backoff_seconds: float = Field(default=0.5, ge=0, description="Linear backoff between read retries")
    token_list_cache_ttl_seconds: int = Field(default=300, ge=0, description="Token list cache TTL (0 disables)")

    # RPC endpoints for chain-bound signers
    eth_rpc_url: str = Field(default=DEFAULT_RPC_URLS[1], description="Ethereum mainnet RPC")
    polygon_rpc_url: str = Field(default=DEFAULT_RPC_URLS[137], description="Polygon RPC")
    arbitrum_rpc_url: str = Field(default=DEFAULT_RPC_URLS[42161], description="Arbitrum RPC")
    base_rpc_url: str = Field(default=DEFAULT_RPC_URLS[8453], description="Base RPC")

    def model_post_init(self, __context: Any) -> None:
        super().model_post_init(__context)
        object.__setattr__(self, "oneinch_base_url", self.oneinch_base_url.rstrip("/"))

    @property
    def has_api_key(self) -> bool:
        return bool(self.oneinch_api_key)

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() in {"production", "prod"}

    @property
    def rpc_urls(self) -> Dict[int, str]:
        return {
            1: self.eth_rpc_url,
            137: self.polygon_rpc_url,
            42161: self.arbitrum_rpc_url,
            8453: self.base_rpc_url,
        }

    def rpc_url_for(self, chain_id: int) -> str:
        """Return the RPC endpoint for ``chain_id``, falling back to mainnet."""
        urls = self.rpc_urls
        return urls.get(chain_id) or urls[1]

    def require_api_key(self) -> str:
        if not self.oneinch_api_key:
            raise ConfigurationError("ONEINCH_API_KEY environment variable is required")
        return self.oneinch_api_key


# Global settings instance
settings = Settings()
