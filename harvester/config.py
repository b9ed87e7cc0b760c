"""Configuration management from environment variables."""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file
load_dotenv()

# Project root
PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = Path(os.getenv("HARVEST_DATA_DIR", str(PROJECT_ROOT / "data")))


class Config:
    """Application configuration."""

    # Summer of Making API
    USERS_URL: str = os.getenv("USERS_URL", "https://summer.hackclub.com/api/v1/users?page=")
    PROJECTS_URL: str = os.getenv(
        "PROJECTS_URL", "https://summer.hackclub.com/api/v1/projects?devlogs=true&page="
    )
    LEADERBOARD_URL: str = os.getenv("LEADERBOARD_URL", "https://explorpheus.hackclub.com/leaderboard")
    USER_AGENT: str = os.getenv("USER_AGENT", "SoM-Analytics/1.0 (Pls dont ban)")

    # Cookie seed, only consulted when no checkpoint exists
    SEED_COOKIES: str = os.getenv("SOM_COOKIES") or os.getenv("COOKIES") or ""

    # Fetching
    TIMEOUT: int = int(os.getenv("TIMEOUT", "20"))
    MAX_RETRIES: int = int(os.getenv("MAX_RETRIES", "5"))
    BASE_WAIT_SECONDS: float = float(os.getenv("BASE_WAIT_SECONDS", "2"))
    MAX_WAIT_SECONDS: float = float(os.getenv("MAX_WAIT_SECONDS", "60"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def validate(cls) -> None:
        """Validate configuration values."""
        errors = []
        if cls.TIMEOUT <= 0:
            errors.append("TIMEOUT must be positive")
        if cls.MAX_RETRIES < 0:
            errors.append("MAX_RETRIES must not be negative")
        if cls.BASE_WAIT_SECONDS <= 0:
            errors.append("BASE_WAIT_SECONDS must be positive")
        if cls.MAX_WAIT_SECONDS < cls.BASE_WAIT_SECONDS:
            errors.append("MAX_WAIT_SECONDS must be >= BASE_WAIT_SECONDS")
        if errors:
            raise ValueError(f"Configuration errors: {', '.join(errors)}")


config = Config()
