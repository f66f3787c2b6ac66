from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="PROXYPRINTER_")

    app_name: str = "ProxyPrinter"
    debug: bool = False
    log_level: str = "INFO"

    scryfall_api_url: str = "https://api.scryfall.com"
    archidekt_api_url: str = "https://archidekt.com/api"
    user_agent: str = "ProxyPrinter/1.0"

    # Timeouts are enforced by httpx, the pipeline adds no deadline of its own
    request_timeout: float = 30.0

    # Scryfall asks for at most 10 requests per second
    scryfall_request_delay: float = 0.1

    max_concurrent_downloads: int = 4

    # Scryfall image_uris key: small, normal, large, png, art_crop, border_crop
    image_version: str = "png"

    # Archidekt categories left out of remote decks
    excluded_categories: set[str] = {"Maybeboard", "Sideboard"}

    output_dir: str = "output"
    default_document_name: str = "deck"


settings = Settings()


# =============================================================================
# CARD GEOMETRY
# =============================================================================

# Standard trading card size in millimetres
CARD_WIDTH_MM = 63.0
CARD_HEIGHT_MM = 88.0

# Space around and between cards on a printed page
PAGE_MARGIN_MM = 5.0
CARD_GAP_MM = 0.0
