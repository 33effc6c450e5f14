"""Database dumps via `mysqldump`.

Used by `scripts/backup.py` and the settings backup endpoints.
"""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from .connection import DBConfig

logger = logging.getLogger(__name__)


class BackupError(RuntimeError):
    """Raised when mysqldump is missing or fails."""


@dataclass(frozen=True)
class BackupFile:
    path: Path
    size_bytes: int
    created_at: datetime


def create_backup(db_config: dict, *, out_dir: str | Path) -> BackupFile:
    target = DBConfig.from_dict(db_config)
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_file = out_dir / f"{target.database}_{ts}.sql"

    cmd = [
        "mysqldump",
        f"-h{target.host}",
        f"-P{target.port}",
        f"-u{target.user}",
        target.database,
    ]
    # Password goes through the environment, not argv.
    env = dict(os.environ, MYSQL_PWD=target.password)

    try:
        with out_file.open("wb") as f:
            subprocess.run(cmd, stdout=f, stderr=subprocess.PIPE, check=True, env=env)
    except FileNotFoundError as e:
        out_file.unlink(missing_ok=True)
        raise BackupError("mysqldump not found; install the MySQL client tools") from e
    except subprocess.CalledProcessError as e:
        out_file.unlink(missing_ok=True)
        stderr = (e.stderr or b"").decode("utf-8", errors="ignore").strip()
        raise BackupError(f"mysqldump failed: {stderr}") from e

    stat = out_file.stat()
    logger.info("Backup created: %s (%s bytes)", out_file, stat.st_size)
    return BackupFile(path=out_file, size_bytes=stat.st_size, created_at=datetime.fromtimestamp(stat.st_mtime))


def latest_backup(out_dir: str | Path) -> Optional[BackupFile]:
    out_dir = Path(out_dir)
    if not out_dir.is_dir():
        return None
    dumps = sorted(out_dir.glob("*.sql"), key=lambda p: p.stat().st_mtime, reverse=True)
    if not dumps:
        return None
    stat = dumps[0].stat()
    return BackupFile(path=dumps[0], size_bytes=stat.st_size, created_at=datetime.fromtimestamp(stat.st_mtime))
