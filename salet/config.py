"""Configuration management from environment variables."""
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env file
load_dotenv()

# Project root
PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = PROJECT_ROOT / "data"

# Fixed storage key of the dashboard snapshot
CACHE_KEY = "cachedData"
DEFAULT_CACHE_FILE = DATA_DIR / f"{CACHE_KEY}.json"

DEFAULT_ALLOWED_ORIGINS = "http://localhost:5173,https://salet-qey5.vercel.app"


def format_database_id(raw_id: Optional[str]) -> Optional[str]:
    """Normalize a database id to the dashed 8-4-4-4-12 form.

    Ids that are not 32 hex characters once dashes are removed are returned
    unchanged.
    """
    if not raw_id:
        return None
    clean_id = raw_id.replace("-", "")
    if len(clean_id) != 32:
        return raw_id
    return (
        f"{clean_id[0:8]}-{clean_id[8:12]}-{clean_id[12:16]}-"
        f"{clean_id[16:20]}-{clean_id[20:]}"
    )


def _split_origins(value: str) -> list[str]:
    return [origin.strip() for origin in value.split(",") if origin.strip()]


class Config:
    """Application configuration, built once at startup and passed around."""

    def __init__(
        self,
        notion_token: Optional[str] = None,
        raw_database_id: Optional[str] = None,
        notion_api_url: str = "https://api.notion.com/v1",
        notion_version: str = "2022-06-28",
        allowed_origins: Optional[list[str]] = None,
        host: str = "0.0.0.0",
        port: int = 3000,
        log_level: str = "INFO",
        gateway_url: str = "http://localhost:3000",
        cache_file: Path = DEFAULT_CACHE_FILE,
        cache_ttl_ms: int = 3_600_000,
    ):
        self.notion_token = notion_token
        self.raw_database_id = raw_database_id
        self.database_id = format_database_id(raw_database_id)
        self.notion_api_url = notion_api_url.rstrip("/")
        self.notion_version = notion_version
        self.allowed_origins = (
            allowed_origins
            if allowed_origins is not None
            else _split_origins(DEFAULT_ALLOWED_ORIGINS)
        )
        self.host = host
        self.port = port
        self.log_level = log_level
        self.gateway_url = gateway_url.rstrip("/")
        self.cache_file = Path(cache_file)
        self.cache_ttl_ms = cache_ttl_ms

    @classmethod
    def from_env(cls) -> "Config":
        """Build a Config from the process environment."""
        return cls(
            notion_token=os.getenv("NOTION_TOKEN"),
            raw_database_id=os.getenv("NOTION_DATABASE_ID"),
            notion_api_url=os.getenv("NOTION_API_URL", "https://api.notion.com/v1"),
            notion_version=os.getenv("NOTION_VERSION", "2022-06-28"),
            allowed_origins=_split_origins(
                os.getenv("ALLOWED_ORIGINS", DEFAULT_ALLOWED_ORIGINS)
            ),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "3000")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            gateway_url=os.getenv("GATEWAY_URL", "http://localhost:3000"),
            cache_file=Path(os.getenv("CACHE_FILE", str(DEFAULT_CACHE_FILE))),
            cache_ttl_ms=int(os.getenv("CACHE_TTL_MS", "3600000")),
        )

    def validate(self) -> None:
        """Validate required configuration."""
        errors = []
        if not self.notion_token:
            errors.append("NOTION_TOKEN is required")
        if not self.database_id:
            errors.append("NOTION_DATABASE_ID is required")
        if errors:
            raise ValueError(f"Configuration errors: {', '.join(errors)}")
