import os
from dataclasses import dataclass
from typing import Optional


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


@dataclass
class Settings:
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.0-flash"
    credibility_timeout: float = 10.0  # seconds, remote analysis only
    analysis_min_chars: int = 20
    database_path: str = "ziptales.db"
    database_enabled: bool = True
    enrich_articles: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from environment variables.
        Call after load_dotenv() so values from .env are picked up.
        """
        return cls(
            gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
            gemini_model=os.getenv("GEMINI_MODEL", "gemini-2.0-flash"),
            credibility_timeout=float(os.getenv("CREDIBILITY_TIMEOUT", "10")),
            analysis_min_chars=int(os.getenv("ANALYSIS_MIN_CHARS", "20")),
            database_path=os.getenv("DATABASE_PATH", "ziptales.db"),
            database_enabled=_env_flag("ENABLE_DATABASE", "true"),
            enrich_articles=_env_flag("ENRICH_ARTICLES", "false"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
