"""Dump the studio ledger database to ``backups/``.

Attendance, credits and payments live only in MySQL, so the dump is taken in a
single transaction (``--single-transaction``) and keeps the newest
``BACKUP_KEEP`` files (default 14). Needs ``mysqldump`` on PATH.
"""

from __future__ import annotations

import importlib
import os
import subprocess
import sys
from datetime import datetime
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.studio_ledger.studio_ledger.database.connection import DBConfig

BACKUP_DIR = REPO_ROOT / "backups"


def _prune(prefix: str, keep: int) -> list[Path]:
    dumps = sorted(BACKUP_DIR.glob(f"{prefix}_*.sql"), reverse=True)
    removed = dumps[keep:]
    for old in removed:
        old.unlink()
    return removed


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    cfg = DBConfig.from_dict(settings.DB_CONFIG)
    keep = int(os.getenv("BACKUP_KEEP", "14"))

    BACKUP_DIR.mkdir(parents=True, exist_ok=True)
    out_file = BACKUP_DIR / f"{cfg.database}_{datetime.now():%Y%m%d_%H%M%S}.sql"

    cmd = [
        "mysqldump",
        f"--host={cfg.host}",
        f"--port={cfg.port}",
        f"--user={cfg.user}",
        "--single-transaction",
        "--routines",
        cfg.database,
    ]
    # Password goes through the environment so it does not show up in the process list.
    env = dict(os.environ, MYSQL_PWD=cfg.password)

    try:
        with out_file.open("wb") as f:
            subprocess.run(cmd, stdout=f, stderr=subprocess.PIPE, env=env, check=True)
    except FileNotFoundError:
        out_file.unlink(missing_ok=True)
        raise SystemExit("`mysqldump` not found. Install the MySQL client tools.")
    except subprocess.CalledProcessError as e:
        out_file.unlink(missing_ok=True)
        raise SystemExit(f"mysqldump failed: {e.stderr.decode(errors='replace').strip()}")

    removed = _prune(cfg.database, keep)
    print(f"OK: Backup created: {out_file} (pruned {len(removed)} old dump(s))")


if __name__ == "__main__":
    main()
