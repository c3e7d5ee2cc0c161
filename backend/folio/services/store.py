"""Portfolio snapshot store backed by dotfiles in the data directory."""

import logging
import os
import tempfile
import threading
from collections.abc import Iterable
from pathlib import Path

from pydantic import ValidationError

from folio.config import SNAPSHOT_EXCLUDE, SNAPSHOT_FILE_MODE, SNAPSHOT_PREFIX
from folio.errors import SnapshotReadFailedError, SnapshotWriteFailedError
from folio.models.fund import Account, StoredFund
from folio.models.portfolio import Snapshot

logger = logging.getLogger(__name__)


class PortfolioStore:
    """Reads and writes per-account holding snapshots."""

    def __init__(self, directory: str | Path = "."):
        self.directory = Path(directory)
        self._locks = {account: threading.Lock() for account in Account}

    def snapshot_path(self, account: Account) -> Path:
        return self.directory / f"{SNAPSHOT_PREFIX}_{account.value.lower()}"

    def save(self, account: Account, funds: Iterable[StoredFund]) -> Path:
        """Replace the snapshot for ``account``.

        The file is written beside its target and renamed over it, so readers
        see either the old or the new snapshot.
        """
        path = self.snapshot_path(account)
        data = Snapshot(funds=list(funds)).to_json()

        with self._locks[account]:
            tmp_name = None
            try:
                # temp name must not start with SNAPSHOT_PREFIX
                fd, tmp_name = tempfile.mkstemp(
                    prefix=f".tmp-{path.name[1:]}.", suffix=".tmp", dir=self.directory
                )
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(data)
                os.chmod(tmp_name, SNAPSHOT_FILE_MODE)
                os.replace(tmp_name, path)
            except OSError as e:
                if tmp_name is not None and os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise SnapshotWriteFailedError(f"cannot write {path}: {e}") from e

        logger.info(f"Saved snapshot {path.name}")
        return path

    def snapshot_files(self) -> list[Path]:
        try:
            entries = sorted(self.directory.iterdir())
        except OSError as e:
            raise SnapshotReadFailedError(f"cannot list {self.directory}: {e}") from e
        return [
            p
            for p in entries
            if p.name.startswith(SNAPSHOT_PREFIX)
            and SNAPSHOT_EXCLUDE not in p.name
            and p.is_file()
        ]

    def load(self, path: Path) -> list[StoredFund]:
        try:
            raw = path.read_bytes()
        except OSError as e:
            raise SnapshotReadFailedError(f"cannot read {path.name}: {e}") from e
        try:
            return Snapshot.model_validate_json(raw).funds
        except ValidationError as e:
            raise SnapshotReadFailedError(f"invalid snapshot {path.name}: {e}") from e

    def load_all(self) -> list[StoredFund]:
        """Concatenate the funds of every snapshot file. Duplicates are kept."""
        funds: list[StoredFund] = []
        for path in self.snapshot_files():
            funds.extend(self.load(path))
        return funds
