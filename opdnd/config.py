"""
Runtime settings.

Values come from the process environment; ``main.py`` calls ``load_dotenv()``
first so a local ``.env`` file works the same way.
"""

import logging
import os
import re
from typing import Literal, Mapping, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, Field

from opdnd.errors import ValidationError

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = "opdnd.db"
DEFAULT_DM_PIN = "5637"

# Plain and "smart" quotes pasted around values in hosting dashboards
_QUOTES_RE = re.compile(r"^['\"“”]+|['\"“”]+$")


def clean(value: Optional[str]) -> str:
    """Strip wrapping quotes and stray whitespace from an env value."""
    return _QUOTES_RE.sub("", str(value or "").strip()).strip()


class Settings(BaseModel):
    store: Literal["sqlite", "rest"] = "sqlite"
    db_path: str = DEFAULT_DB_PATH
    rest_url: str = ""
    rest_key: str = ""
    table: str = "characters"
    dm_pin: str = DEFAULT_DM_PIN
    persist_retries: int = Field(3, ge=1)
    persist_backoff: float = Field(0.2, ge=0)
    request_timeout: float = Field(10.0, gt=0)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if env is None else env

        def get(*names: str, default: str = "") -> str:
            for name in names:
                value = clean(env.get(name))
                if value:
                    return value
            return default

        store = get("OPDND_STORE", default="sqlite").lower()
        if store not in ("sqlite", "rest"):
            raise ValidationError(f"OPDND_STORE must be 'sqlite' or 'rest', got '{store}'.")

        try:
            settings = cls(
                store=store,
                db_path=get("OPDND_DB_PATH", default=DEFAULT_DB_PATH),
                rest_url=get("SUPABASE_URL", "VITE_SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL"),
                rest_key=get("SUPABASE_ANON_KEY", "VITE_SUPABASE_ANON_KEY", "NEXT_PUBLIC_SUPABASE_ANON_KEY"),
                table=get("OPDND_TABLE", default="characters"),
                dm_pin=get("OPDND_DM_PIN", default=DEFAULT_DM_PIN),
                persist_retries=int(get("OPDND_PERSIST_RETRIES", default="3")),
                persist_backoff=float(get("OPDND_PERSIST_BACKOFF", default="0.2")),
                request_timeout=float(get("OPDND_REQUEST_TIMEOUT", default="10")),
                log_level=get("LOG_LEVEL", default="INFO").upper(),
            )
        except ValueError as e:
            # pydantic's ValidationError is a ValueError too
            raise ValidationError(f"Invalid settings: {e}") from e

        if settings.store == "rest":
            settings.check_rest_url()
        return settings

    def check_rest_url(self):
        """Fail early and loudly on a missing or malformed remote URL."""
        parsed = urlparse(self.rest_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            logger.error(f"Remote store URL is invalid after cleaning: {self.rest_url!r}")
            raise ValidationError(f"Invalid remote store URL: {self.rest_url!r}")
        if not self.rest_key:
            raise ValidationError("Remote store key is not set.")
