"""
ASGI entry point for RapidChat.

``application`` answers Socket.IO traffic (long-polling and WebSocket) on
``settings.SOCKETIO_PATH`` and hands every other request to Django.

Run with e.g. ``uvicorn config.asgi:application``.
"""

import os
import sys
from pathlib import Path

from django.core.asgi import get_asgi_application

# Apps live under the interior rapidchat directory.
BASE_DIR = Path(__file__).resolve(strict=True).parent.parent
sys.path.append(str(BASE_DIR / "rapidchat"))

# BUILD_ENV=local picks the dev settings when DJANGO_SETTINGS_MODULE is unset.
_settings_module = (
    "config.settings.local"
    if os.environ.get("BUILD_ENV", "production").lower() == "local"
    else "config.settings.production"
)
os.environ.setdefault("DJANGO_SETTINGS_MODULE", _settings_module)

# Django must be set up before anything touches models or settings below.
django_application = get_asgi_application()

from django.conf import settings  # noqa: E402
from socketio import ASGIApp  # noqa: E402

from rapidchat.realtime.socketio import sio  # noqa: E402

application = ASGIApp(
    sio,
    other_asgi_app=django_application,
    socketio_path=settings.SOCKETIO_PATH,
)
