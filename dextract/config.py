# dextract/config.py
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RateLimitConfig(BaseModel):
    """At most `max_requests` per `per_time_window` seconds."""
    max_requests: int = Field(gt=0)
    per_time_window: float = Field(gt=0)

    @property
    def interval(self) -> float:
        return self.per_time_window / self.max_requests


class ProviderConfig(BaseModel):
    base_url: str
    api_key: Optional[str] = None
    rate_limit: Optional[RateLimitConfig] = None
    timeout: float = Field(default=10.0, gt=0, description="Request timeout in seconds")


class CloudflareKVConfig(BaseModel):
    account_id: str
    namespace_id: str
    api_token: str
    api_base: str = "https://api.cloudflare.com/client/v4"
    list_page_limit: int = Field(default=1000, ge=10, le=1000)
    max_list_pages: int = Field(default=10, ge=1)


class CacheConfig(BaseModel):
    backend: Literal["memory", "cloudflare"] = "memory"
    default_ttl: float = 24 * 60 * 60
    price_ttl: float = 5 * 60
    quote_ttl: float = 30
    single_flight: bool = False
    cloudflare: Optional[CloudflareKVConfig] = None

    @model_validator(mode="after")
    def check_backend(self):
        if self.backend == "cloudflare" and self.cloudflare is None:
            raise ValueError("cloudflare backend selected without cloudflare settings")
        return self


class LoggingConfig(BaseModel):
    level: str = "INFO"
    log_dir: Optional[str] = None


class WorkerConfig(BaseModel):
    token_sync_interval: float = 24 * 60 * 60
    price_refresh_interval: float = 5 * 60
    chains: List[str] = Field(default_factory=lambda: ["ethereum:mainnet", "solana:mainnet"])


def _coingecko_defaults() -> ProviderConfig:
    # 10 requests per minute for the free tier
    return ProviderConfig(
        base_url="https://api.coingecko.com/api/v3",
        rate_limit=RateLimitConfig(max_requests=10, per_time_window=60),
    )


class AppConfig(BaseModel):
    coingecko: ProviderConfig = Field(default_factory=_coingecko_defaults)
    jupiter_tokens: ProviderConfig = Field(
        default_factory=lambda: ProviderConfig(base_url="https://tokens.jup.ag")
    )
    jupiter_quotes: ProviderConfig = Field(
        default_factory=lambda: ProviderConfig(base_url="https://quote-api.jup.ag/v6")
    )
    default_price_provider: str = "coingecko"
    default_token_provider: str = "coingecko"
    cache: CacheConfig = Field(default_factory=CacheConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    workers: WorkerConfig = Field(default_factory=WorkerConfig)


class Settings(BaseSettings):
    """Environment boundary. Only this class reads the process environment."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    # --- Providers ---
    coingecko_api_key: Optional[str] = Field(default=None, alias="COINGECKO_API_KEY")
    coingecko_base_url: str = Field(default="https://api.coingecko.com/api/v3", alias="COINGECKO_BASE_URL")
    coingecko_max_requests: int = Field(default=10, alias="COINGECKO_MAX_REQUESTS")
    coingecko_time_window: float = Field(default=60, alias="COINGECKO_TIME_WINDOW")
    jupiter_api_key: Optional[str] = Field(default=None, alias="JUPITER_API_KEY")
    provider_timeout: float = Field(default=10.0, alias="PROVIDER_TIMEOUT")

    # --- Cache ---
    cache_backend: Literal["memory", "cloudflare"] = Field(default="memory", alias="DEXTRACT_CACHE_BACKEND")
    cache_single_flight: bool = Field(default=False, alias="DEXTRACT_CACHE_SINGLE_FLIGHT")
    cloudflare_account_id: Optional[str] = Field(default=None, alias="CLOUDFLARE_ACCOUNT_ID")
    cloudflare_namespace_id: Optional[str] = Field(default=None, alias="CLOUDFLARE_KV_NAMESPACE_ID")
    cloudflare_api_token: Optional[str] = Field(default=None, alias="CLOUDFLARE_API_TOKEN")

    # --- Logging ---
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_dir: Optional[str] = Field(default=None, alias="LOG_DIR")

    # --- Workers ---
    worker_chains: Optional[str] = Field(default=None, alias="DEXTRACT_WORKER_CHAINS")

    def to_app_config(self) -> AppConfig:
        cloudflare = None
        if self.cloudflare_account_id and self.cloudflare_namespace_id and self.cloudflare_api_token:
            cloudflare = CloudflareKVConfig(
                account_id=self.cloudflare_account_id,
                namespace_id=self.cloudflare_namespace_id,
                api_token=self.cloudflare_api_token,
            )

        workers = WorkerConfig()
        if self.worker_chains:
            workers = WorkerConfig(
                chains=[c.strip() for c in self.worker_chains.split(",") if c.strip()]
            )

        return AppConfig(
            coingecko=ProviderConfig(
                base_url=self.coingecko_base_url,
                api_key=self.coingecko_api_key,
                rate_limit=RateLimitConfig(
                    max_requests=self.coingecko_max_requests,
                    per_time_window=self.coingecko_time_window,
                ),
                timeout=self.provider_timeout,
            ),
            jupiter_tokens=ProviderConfig(
                base_url="https://tokens.jup.ag",
                api_key=self.jupiter_api_key,
                timeout=self.provider_timeout,
            ),
            jupiter_quotes=ProviderConfig(
                base_url="https://quote-api.jup.ag/v6",
                api_key=self.jupiter_api_key,
                timeout=self.provider_timeout,
            ),
            cache=CacheConfig(
                backend=self.cache_backend,
                single_flight=self.cache_single_flight,
                cloudflare=cloudflare,
            ),
            logging=LoggingConfig(level=self.log_level, log_dir=self.log_dir),
            workers=workers,
        )
