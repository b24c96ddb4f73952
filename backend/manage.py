#!/usr/bin/env python
from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import NoReturn

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent
load_dotenv(BASE_DIR / ".env")


def main() -> NoReturn:
    # Sans DATABASE_URL, le poste de développement tourne sur SQLite.
    if not os.getenv("DATABASE_URL") and not os.getenv("USE_SQLITE"):
        os.environ["USE_SQLITE"] = "1"
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "core.settings")
    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Django est introuvable : installez le projet (pip install -e .) dans le venv actif."
        ) from exc
    execute_from_command_line(sys.argv)


if __name__ == "__main__":
    main()
