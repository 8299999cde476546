from pathlib import Path

from openai import OpenAI
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .utils import ConfigurationMissingError


class Settings(BaseSettings):
    """Application settings loaded from the environment."""

    model_config = SettingsConfigDict(env_prefix="CASTCARDS_", env_file=".env", extra="ignore")

    api_key: str = Field(
        default="",
        validation_alias=AliasChoices("CASTCARDS_API_KEY", "OPENAI_API_KEY"),
    )
    model: str = "gpt-4o-mini"

    card_temperature: float = 0.7
    # Lower temperature for more consistent rule following
    battle_temperature: float = 0.5

    store_path: Path = Path("~/.castcards/cards.json")
    image_base_url: str = "https://picsum.photos/seed"


def build_client(settings: Settings) -> OpenAI:
    """Return an OpenAI client, or fail if no credential is configured."""
    if not settings.api_key:
        raise ConfigurationMissingError("OPENAI_API_KEY is not set.")
    return OpenAI(api_key=settings.api_key)
