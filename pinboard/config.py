# Pinboard viewer — configuration
# Override values via config.yaml, environment variables or CLI args.

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_PATH = Path("~/.config/pinboard/config.yaml").expanduser()


class ConfigError(Exception):
    """Raised when configuration is invalid or incomplete."""
    pass


@dataclass
class ViewerConfig:
    """Runtime configuration for the board viewer."""

    # Datastore (Supabase project URL, REST lives under /rest/v1)
    supabase_url: str = ""
    anon_key_env: str = "PINBOARD_ANON_KEY"  # env var holding the public anon key
    timeout: float = 10.0

    # Behavior
    log_level: str = "INFO"
    open_links: bool = True

    @property
    def anon_key(self) -> str:
        return os.environ.get(self.anon_key_env, "")

    def apply_env(self) -> None:
        """Environment overrides (PINBOARD_URL)."""
        url = os.environ.get("PINBOARD_URL")
        if url:
            self.supabase_url = url

    def validate(self) -> None:
        if not self.supabase_url:
            raise ConfigError(
                "No datastore URL configured.\n"
                "Set it:  export PINBOARD_URL=https://<project>.supabase.co\n"
                "or add supabase_url to the config file."
            )
        if not self.supabase_url.startswith(("http://", "https://")):
            raise ConfigError(f"supabase_url must be http(s), got {self.supabase_url!r}")
        if self.timeout <= 0:
            raise ConfigError(f"timeout must be positive, got {self.timeout}")

    @classmethod
    def load(cls, path: Optional[str] = None) -> "ViewerConfig":
        """Load config from YAML file, falling back to defaults."""
        path = path or os.environ.get("PINBOARD_CONFIG")
        cfg_path = Path(path) if path else CONFIG_PATH
        if cfg_path.exists():
            try:
                with open(cfg_path, "r") as f:
                    data = yaml.safe_load(f) or {}
                known = {fld.name for fld in fields(cls)}
                cfg = cls(**{k: v for k, v in data.items() if k in known})
            except Exception as e:
                logger.warning(f"Ignoring unreadable config {cfg_path}: {e}")
                cfg = cls()
        else:
            cfg = cls()
        cfg.apply_env()
        return cfg
