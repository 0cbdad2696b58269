"""Per-file sync record: path, last modification time, last sync time."""

import os
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Union


@dataclass(frozen=True)
class FileRecord:
    """Immutable (path, modification_time, sync_time). Values are stored exactly as given, without validation."""

    path: Path
    modification_time: datetime
    sync_time: datetime

    @classmethod
    def for_path(cls, path: Union[str, "os.PathLike[str]"], sync_time: datetime) -> "FileRecord":
        """Record for an existing file; modification_time is its mtime as a UTC datetime."""
        p = Path(path)
        mtime = datetime.fromtimestamp(p.stat().st_mtime, tz=timezone.utc)
        return cls(p, mtime, sync_time)

    def with_sync_time(self, sync_time: datetime) -> "FileRecord":
        """Copy of this record marked as synced at sync_time."""
        return replace(self, sync_time=sync_time)

    @property
    def modified_since_sync(self) -> bool:
        """True if the file changed after it was last synced (local newer wins)."""
        return self.modification_time > self.sync_time
