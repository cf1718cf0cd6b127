"""
Application settings and configuration
"""

import os
from pathlib import Path
from dotenv import load_dotenv
from typing import Optional
from todolist.config.constants import DEFAULT_DATA_FILE

# Load environment variables from .env file
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


class Settings:
    """Application settings loaded from environment variables"""

    # Storage
    TODO_DATA_FILE: str = os.getenv("TODO_DATA_FILE", DEFAULT_DATA_FILE)

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "WARNING")
    LOG_FILE: Optional[str] = os.getenv("LOG_FILE", None)

    @classmethod
    def validate(cls) -> bool:
        """Validate that configured values are usable"""
        if not cls.TODO_DATA_FILE or not cls.TODO_DATA_FILE.strip():
            raise ValueError("TODO_DATA_FILE must not be empty")

        return True


# Global settings instance
settings = Settings()
