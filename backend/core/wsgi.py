"""Point d'entrée WSGI (gunicorn core.wsgi:application)."""
from __future__ import annotations

import os
from pathlib import Path

from django.core.wsgi import get_wsgi_application
from dotenv import load_dotenv

# Les variables déjà présentes dans l'environnement l'emportent sur le fichier .env.
load_dotenv(Path(__file__).resolve().parent.parent / ".env")
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "core.settings")

application = get_wsgi_application()
