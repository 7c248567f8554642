import logging
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

DATA_DIR = Path(__file__).parent / "data"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="DECKFORGE_")

    app_name: str = "DeckForge"
    debug: bool = False

    log_level: str = "INFO"

    # Local Scryfall bulk JSON used to hydrate card pools
    card_database_path: Path = DATA_DIR / "default-cards.json"


settings = Settings()


def configure_logging(level: str | None = None) -> None:
    """Set up root logging for scripts and notebooks that drive the engine."""
    if level is None:
        level = "DEBUG" if settings.debug else settings.log_level
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


# =============================================================================
# ENGINE LIMITS
# =============================================================================

# Power tuning never runs more than this many iterations
MAX_TUNING_ITERATIONS = 8

# Tuning stops once |power - target| is within this tolerance
POWER_TOLERANCE = 1.0

# Commander is drawn at random from this many top-scoring candidates
COMMANDER_TOP_N = 3
