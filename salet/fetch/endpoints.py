"""URL builders for the external database API."""
from salet.config import Config


def pages_url(config: Config) -> str:
    """URL for creating pages."""
    return f"{config.notion_api_url}/pages"


def database_url(config: Config) -> str:
    """URL for reading the database schema."""
    return f"{config.notion_api_url}/databases/{config.database_id}"


def query_url(config: Config) -> str:
    """URL for querying database rows."""
    return f"{database_url(config)}/query"
