from typing import Annotated, Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from html_i18n.domain.languages.services import canonical_tag

DEFAULT_TRANSLATIONS_DIR = "i18n"
DEFAULT_MARKER = "i18n"
DEFAULT_SOURCE_LANGUAGE = "en"


def _normalize_languages(value: Any) -> list[str]:
    """Accept comma-separated string or list-like and canonicalize tags."""
    if value is None or value == "":
        return []

    if isinstance(value, str):
        parts = [part.strip() for part in value.split(",")]
    elif isinstance(value, (list, tuple, set)):
        parts = [str(part).strip() for part in value]
    else:
        return []

    languages: list[str] = []
    for part in parts:
        if not part:
            continue
        tag = canonical_tag(part)
        if tag not in languages:
            languages.append(tag)
    return languages


class Settings(BaseSettings):
    """Translation middleware settings."""

    # Catalogs
    TRANSLATIONS_DIR: str = DEFAULT_TRANSLATIONS_DIR
    SOURCE_LANGUAGE: str = DEFAULT_SOURCE_LANGUAGE
    LANGUAGES: Annotated[list[str], NoDecode] = Field(default_factory=list)
    UPDATE_TRANSLATIONS: bool = False

    # Markers
    HTML_ATTRIBUTE: str = DEFAULT_MARKER
    HTML_TAG: str = DEFAULT_MARKER
    EXPOSE_TO_JS: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""

    # Demo application
    SITE_DIR: str = "example/site"

    model_config = SettingsConfigDict(
        env_prefix="I18N_",
        env_file=".env",
        extra="ignore",
        frozen=True,
    )

    @field_validator("LANGUAGES", mode="before")
    @classmethod
    def parse_languages(cls, value: Any) -> list[str]:
        """Support comma-separated I18N_LANGUAGES from environment."""
        return _normalize_languages(value)

    @field_validator("SOURCE_LANGUAGE")
    @classmethod
    def parse_source_language(cls, value: str) -> str:
        return canonical_tag(value)

    @field_validator("HTML_ATTRIBUTE", "HTML_TAG")
    @classmethod
    def check_marker_name(cls, value: str) -> str:
        value = value.strip().lower()
        if not value or any(ch.isspace() for ch in value) or any(ch in value for ch in "<>\"'=/"):
            raise ValueError(f"invalid marker name {value!r}")
        return value
