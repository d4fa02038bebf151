"""Runtime configuration for the history store.

Values come from the process environment. The app entry point calls
`load_dotenv()` first, so a local `.env` file works too.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_HISTORY_PATH = Path.home() / ".omnifind" / "divination_history.json"
DEFAULT_TABLE = "divination_history"


@dataclass(frozen=True)
class StoreConfig:
    """Where history lives. Remote sync is off unless both URL and key are set."""

    supabase_url: str = ""  # "https://xyz.supabase.co"
    supabase_key: str = ""  # anon/service key, sent as apikey + bearer
    history_path: Path = field(default=DEFAULT_HISTORY_PATH)
    table: str = DEFAULT_TABLE
    timeout: float = 10.0  # seconds, per remote request

    @property
    def remote_enabled(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)


def load_config(environ: Mapping[str, str] | None = None) -> StoreConfig:
    """Build a StoreConfig from environment variables.

    Reads SUPABASE_URL, SUPABASE_KEY and OMNIFIND_HISTORY_PATH. Missing
    values leave the store in local-only mode.
    """
    env = os.environ if environ is None else environ
    history_path = env.get("OMNIFIND_HISTORY_PATH")
    return StoreConfig(
        supabase_url=env.get("SUPABASE_URL", "").strip().rstrip("/"),
        supabase_key=env.get("SUPABASE_KEY", "").strip(),
        history_path=Path(history_path).expanduser() if history_path else DEFAULT_HISTORY_PATH,
    )
