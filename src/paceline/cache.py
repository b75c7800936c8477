"""Single-record usage cache.

The file format is the one the shell status line used:

    1735689600
    {"five_hour": {...}, "seven_day": {...}}

Line one is the capture time in epoch seconds, the rest is the raw API body.
"""

import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

from .models import CacheRecord

logger = logging.getLogger(__name__)

CACHE_TTL = 60  # seconds


class CacheStore(ABC):
    @abstractmethod
    def read(self) -> CacheRecord | None: ...

    @abstractmethod
    def write(self, record: CacheRecord) -> None: ...

    def is_fresh(self, record: CacheRecord, now: int) -> bool:
        return now - record.captured_at < CACHE_TTL


class FileCacheStore(CacheStore):
    def __init__(self, path: Path):
        self.path = path

    def read(self) -> CacheRecord | None:
        try:
            content = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Cache %s unreadable: %s", self.path, e)
            return None

        first_line, _, payload = content.partition("\n")
        try:
            captured_at = int(first_line.strip())
        except ValueError:
            logger.debug("Cache %s has no timestamp line", self.path)
            return None
        return CacheRecord(captured_at=captured_at, payload=payload)

    def write(self, record: CacheRecord) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(f"{record.captured_at}\n{record.payload}")
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
