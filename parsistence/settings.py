"""Parsistence settings with environment variable support."""

import os
from pathlib import Path

# Load .env file from project root
from dotenv import load_dotenv

# Find .env file - check current dir and parent dirs
def _find_env_file() -> Path | None:
    """Find .env file in current or parent directories."""
    current = Path.cwd()
    for _ in range(5):  # Check up to 5 levels
        env_file = current / ".env"
        if env_file.exists():
            return env_file
        current = current.parent
    # Also check package directory
    pkg_dir = Path(__file__).parent.parent
    env_file = pkg_dir / ".env"
    if env_file.exists():
        return env_file
    return None

env_file = _find_env_file()
if env_file:
    load_dotenv(env_file, override=False)

from pydantic import BaseModel, Field


class ValidationSettings(BaseModel):
    """Presence validation settings."""

    # Formatted with the field name when no custom message was declared
    blank_message: str = os.getenv("VALIDATION__BLANK_MESSAGE", "{field} can't be blank")

    def message_for(self, field: str) -> str:
        return self.blank_message.format(field=field)


class StoreSettings(BaseModel):
    """In-process record store settings."""

    object_id_length: int = Field(
        default=int(os.getenv("STORE__OBJECT_ID_LENGTH", "10")), gt=0
    )


class Settings(BaseModel):
    """Application settings."""

    validation: ValidationSettings = ValidationSettings()
    store: StoreSettings = StoreSettings()


settings = Settings()
