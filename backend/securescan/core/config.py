import logging
import os
from functools import lru_cache
from typing import Optional, Tuple

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()

DEFAULT_REMEDIATION_LINK = "https://owasp.org/www-project-top-ten/"
DEFAULT_CORS_ORIGINS = ("http://localhost:3000", "http://127.0.0.1:3000")


def _optional_int(value: Optional[str]) -> Optional[int]:
    if value is None or not value.strip():
        return None
    return int(value)


class Settings(BaseModel):
    openai_api_key: Optional[str] = None
    advisor_model: str = "gpt-4o-mini"
    advisor_timeout: float = 20.0
    probe_url: Optional[str] = None
    probe_seed: Optional[int] = None
    probe_timeout: float = 30.0
    fallback_link: str = DEFAULT_REMEDIATION_LINK
    cors_origins: Tuple[str, ...] = DEFAULT_CORS_ORIGINS
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        origins = os.getenv("SECURESCAN_CORS_ORIGINS")
        return cls(
            openai_api_key=os.getenv("OPENAI_API_KEY") or None,
            advisor_model=os.getenv("SECURESCAN_ADVISOR_MODEL", "gpt-4o-mini"),
            advisor_timeout=float(os.getenv("SECURESCAN_ADVISOR_TIMEOUT", "20")),
            probe_url=os.getenv("SECURESCAN_PROBE_URL") or None,
            probe_seed=_optional_int(os.getenv("SECURESCAN_PROBE_SEED")),
            probe_timeout=float(os.getenv("SECURESCAN_PROBE_TIMEOUT", "30")),
            fallback_link=os.getenv("SECURESCAN_FALLBACK_LINK") or DEFAULT_REMEDIATION_LINK,
            cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip())
            if origins else DEFAULT_CORS_ORIGINS,
            log_level=os.getenv("SECURESCAN_LOG_LEVEL", "INFO").upper(),
        )


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
