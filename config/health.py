from __future__ import annotations

from typing import Any

from django.db import connection
from django.db import transaction
from django.http import JsonResponse

from rapidchat.realtime.socketio import get_chat_service


def check_db() -> dict[str, Any]:
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1;")
            cursor.fetchone()
    except Exception as exc:  # noqa: BLE001 - health must degrade, not crash
        return {"ok": False, "error": str(exc)}
    return {"ok": True}


def check_chat() -> dict[str, Any]:
    """Live connection count and history fill of this process's chat state."""
    try:
        state = get_chat_service().state
        return {
            "ok": True,
            "connections": len(state.registry),
            "history": len(state.log),
            "history_limit": state.log.capacity,
        }
    except Exception as exc:  # noqa: BLE001 - health must degrade, not crash
        return {"ok": False, "error": str(exc)}


CHECKS = {
    "db": check_db,
    "chat": check_chat,
}


@transaction.non_atomic_requests
def health(request):
    components = {name: check() for name, check in CHECKS.items()}
    healthy = [component["ok"] for component in components.values()]

    if all(healthy):
        status = "ok"
    elif any(healthy):
        status = "degraded"
    else:
        status = "down"

    return JsonResponse(
        {"status": status, "components": components},
        status=200 if status == "ok" else 503,
    )
