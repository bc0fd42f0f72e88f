"""Write a ``mysqldump`` snapshot of the configured database to ./backups."""

from __future__ import annotations

import importlib
import sys
from datetime import datetime
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.command_console.command_console.core.exceptions import StorageError
from src.command_console.command_console.database.bootstrap import dump_database


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db = dict(settings.DB_CONFIG)

    out_dir = REPO_ROOT / "backups"
    out_dir.mkdir(parents=True, exist_ok=True)

    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_file = out_dir / f"{db['database']}_{ts}.sql"

    try:
        out_file.write_bytes(dump_database(db))
    except StorageError as exc:
        raise SystemExit(f"Backup failed: {exc}")
    print(f"OK: Backup created: {out_file}")


if __name__ == "__main__":
    main()
