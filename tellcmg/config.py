"""
Runtime configuration for the TellCMG idea assistant.

Settings come from the process environment. A ``.env`` file at the project
root is merged in first; variables already present in the environment win.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Every submission goes to the IT Product intake mailbox
IDEA_RECIPIENT = "mhansen@cmgfi.com"

DEFAULT_OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_STRUCTURE_MODEL = "anthropic/claude-opus-4"
DEFAULT_INTERVIEW_MODEL = "anthropic/claude-3.5-haiku"
DEFAULT_GROQ_MODEL = "llama-3.3-70b-versatile"

LLM_PROVIDER_CHOICES = ("auto", "openrouter", "groq", "none")


def load_env_file(path: Optional[Path] = None) -> None:
    """Merge ``KEY=VALUE`` lines from a .env file into ``os.environ``."""
    env_path = path or PROJECT_ROOT / ".env"
    if not env_path.exists():
        return
    for line in env_path.read_text().splitlines():
        line = line.strip()
        if line and not line.startswith("#") and "=" in line:
            key, _, value = line.partition("=")
            os.environ.setdefault(key.strip(), value.strip().strip('"').strip("'"))


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logging.getLogger(__name__).warning("Ignoring non-integer %s=%r", name, raw)
        return default


@dataclass(frozen=True)
class LLMSettings:
    """Which hosted model service to call, and with what."""

    provider: str = "auto"
    openrouter_api_key: Optional[str] = None
    openrouter_base_url: str = DEFAULT_OPENROUTER_BASE_URL
    structure_model: str = DEFAULT_STRUCTURE_MODEL
    interview_model: str = DEFAULT_INTERVIEW_MODEL
    groq_api_key: Optional[str] = None
    groq_model: str = DEFAULT_GROQ_MODEL
    timeout: int = 60

    @property
    def is_configured(self) -> bool:
        if self.provider == "none":
            return False
        if self.provider == "openrouter":
            return bool(self.openrouter_api_key)
        if self.provider == "groq":
            return bool(self.groq_api_key)
        return bool(self.openrouter_api_key or self.groq_api_key)


@dataclass(frozen=True)
class MailSettings:
    """SMTP transport settings."""

    user: Optional[str] = None
    password: Optional[str] = None
    host: str = "smtp.gmail.com"
    port: int = 587
    recipient: str = IDEA_RECIPIENT
    timeout: int = 30

    @property
    def is_configured(self) -> bool:
        return bool(self.user and self.password)


@dataclass(frozen=True)
class Settings:
    """Top-level application settings."""

    llm: LLMSettings
    mail: MailSettings
    home_dir: Path
    log_level: str = "INFO"
    port: int = 5001

    @classmethod
    def load(cls, env_file: Optional[Path] = None) -> "Settings":
        """Load settings from the environment (after merging .env)."""
        load_env_file(env_file)

        provider = os.getenv("TELLCMG_LLM_PROVIDER", "auto").strip().lower()
        if provider not in LLM_PROVIDER_CHOICES:
            logging.getLogger(__name__).warning(
                "Unknown TELLCMG_LLM_PROVIDER=%r, using auto", provider
            )
            provider = "auto"

        llm = LLMSettings(
            provider=provider,
            openrouter_api_key=os.getenv("OPENROUTER_API_KEY") or None,
            openrouter_base_url=os.getenv("OPENROUTER_BASE_URL", DEFAULT_OPENROUTER_BASE_URL),
            structure_model=os.getenv("TELLCMG_STRUCTURE_MODEL", DEFAULT_STRUCTURE_MODEL),
            interview_model=os.getenv("TELLCMG_INTERVIEW_MODEL", DEFAULT_INTERVIEW_MODEL),
            groq_api_key=os.getenv("GROQ_API_KEY") or None,
            groq_model=os.getenv("TELLCMG_GROQ_MODEL", DEFAULT_GROQ_MODEL),
            timeout=_int_env("TELLCMG_LLM_TIMEOUT", 60),
        )
        mail = MailSettings(
            user=os.getenv("SMTP_USER") or None,
            password=os.getenv("SMTP_PASSWORD") or None,
            host=os.getenv("SMTP_HOST", "smtp.gmail.com"),
            port=_int_env("SMTP_PORT", 587),
        )
        home = os.getenv("TELLCMG_HOME")
        return cls(
            llm=llm,
            mail=mail,
            home_dir=Path(home).expanduser() if home else Path.home() / ".tellcmg",
            log_level=os.getenv("TELLCMG_LOG_LEVEL", "INFO").upper(),
            port=_int_env("PORT", 5001),
        )


def configure_logging(level: str = "INFO") -> None:
    """Apply a basic log format for the web app and the CLI."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
