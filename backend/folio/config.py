"""Application configuration."""

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from folio.errors import ConfigMissingError
from folio.models.fund import Account

BASE_DIR = Path(__file__).resolve().parent
UI_DIST_DIR = BASE_DIR / "ui" / "dist"

# Public AMFI daily NAV catalog (semicolon separated, NAV in field 4)
NAV_FEED_URL = "https://portal.amfiindia.com/spages/NAVAll.txt"

LISTEN_HOST = "localhost"
LISTEN_PORT = 9876

# Snapshot files: ".portfolio_<account>" in the data directory
SNAPSHOT_PREFIX = ".portfolio"
SNAPSHOT_EXCLUDE = "example"
SNAPSHOT_FILE_MODE = 0o644

# Records with this symbol are not priced from the NAV feed
NA_SYMBOL = "NA"
MONTHLY_SUFFIX = "monthly"

_CREDENTIAL_ENV = {
    Account.EQUITY: ("EQ_KITE_API_KEY", "EQ_KITE_API_SECRET"),
    Account.DEBT: ("DEBT_KITE_API_KEY", "DEBT_KITE_API_SECRET"),
}


@dataclass(frozen=True)
class AccountCredentials:
    api_key: str
    api_secret: str


@dataclass(frozen=True)
class Settings:
    """Environment-based configuration, built once at startup."""

    credentials: dict[Account, AccountCredentials]
    data_dir: Path
    rules_file: Path | None = None
    log_level: str = "INFO"

    def credentials_for(self, account: Account) -> AccountCredentials:
        return self.credentials[account]

    @staticmethod
    def from_env() -> "Settings":
        credentials = {}
        for account, (key_var, secret_var) in _CREDENTIAL_ENV.items():
            credentials[account] = AccountCredentials(
                api_key=_require_env(key_var),
                api_secret=_require_env(secret_var),
            )

        rules_file = os.getenv("FOLIO_RULES_FILE")
        return Settings(
            credentials=credentials,
            data_dir=Path(os.getenv("FOLIO_DATA_DIR") or "."),
            rules_file=Path(rules_file) if rules_file else None,
            log_level=os.getenv("FOLIO_LOG_LEVEL", "INFO"),
        )


def _require_env(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise ConfigMissingError(f"env {name} not found")
    return value


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings, read from the environment on first use."""
    return Settings.from_env()
