from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Asset Tracker API"
    app_version: str = "1.0.0"
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    request_timeout_seconds: int = 10
    retry_attempts: int = 1
    retry_backoff_base_seconds: float = 0.3
    user_agent: str = "asset-tracker/1.0"

    cache_ttl_seconds: int = 60
    cache_sweep_interval_seconds: int = 120

    yahoo_base_url: str = "https://query1.finance.yahoo.com"
    coingecko_base_url: str = "https://api.coingecko.com/api/v3"
    binance_base_url: str = "https://api.binance.com"
    bitget_base_url: str = "https://api.bitget.com"
    frankfurter_base_url: str = "https://api.frankfurter.app"

    # "coingecko" serves full OHLC series, "ticker" serves a single spot price
    crypto_provider: str = "coingecko"

    stock_period_params: dict[str, tuple[str, str]] = {
        "1h": ("1d", "5m"),
        "1d": ("5d", "30m"),
        "1w": ("1mo", "1h"),
    }

    coingecko_ids: dict[str, str] = {
        "BTC": "bitcoin",
        "ETH": "ethereum",
        "SOL": "solana",
        "BNB": "binancecoin",
        "XRP": "ripple",
        "ADA": "cardano",
        "DOGE": "dogecoin",
        "TRX": "tron",
        "DOT": "polkadot",
        "LINK": "chainlink",
        "AVAX": "avalanche-2",
        "LTC": "litecoin",
        "MATIC": "matic-network",
        "ATOM": "cosmos",
        "XLM": "stellar",
    }

    stock_universe: list[str] = [
        "AAPL", "MSFT", "GOOGL", "AMZN", "NVDA", "TSLA", "META", "NFLX",
        "AMD", "INTC", "JPM", "V", "MA", "DIS", "KO", "PEP", "WMT", "COST",
        "ORCL", "CRM", "ADBE", "CSCO", "QCOM", "IBM", "BA", "NKE", "XOM",
        "CVX", "PFE", "MRK",
    ]
    crypto_universe: list[str] = [
        "BTC", "ETH", "SOL", "BNB", "XRP", "ADA", "DOGE", "TRX", "DOT",
        "LINK", "AVAX", "LTC", "MATIC", "ATOM", "XLM",
    ]
    forex_universe: list[str] = [
        "EURUSD", "GBPUSD", "USDJPY", "USDCHF", "AUDUSD", "USDCAD", "NZDUSD",
        "EURGBP", "EURJPY", "GBPJPY", "EURCHF", "AUDJPY",
    ]

    # Symbols served by the bulk /api/assets endpoint when none are requested
    default_symbols: list[str] = [
        "BTC-USD", "ETH-USD", "SOL-USD", "DOGE-USD", "ADA-USD",
        "AAPL", "TSLA", "MSFT", "GOOGL", "AMZN", "NVDA",
        "EURUSD=X", "GBPUSD=X", "USDJPY=X",
    ]

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")


settings = Settings()
