"""Dump the configured database into BACKUP_DIR with `mysqldump`."""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.acquittal_system.acquittal_system.common.logging_setup import configure_logging
from src.acquittal_system.acquittal_system.database.backup import BackupError, create_backup


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    out_dir = Path(getattr(settings, "BACKUP_DIR", "backups"))
    if not out_dir.is_absolute():
        out_dir = REPO_ROOT / out_dir

    try:
        backup = create_backup(dict(settings.DB_CONFIG), out_dir=out_dir)
    except BackupError as e:
        raise SystemExit(str(e))
    print(f"OK: Backup created: {backup.path} ({backup.size_bytes} bytes)")


if __name__ == "__main__":
    main()
