"""drf-spectacular postprocessing for the RapidChat API schema."""

from __future__ import annotations

from typing import Any

OPERATION_KEYS = frozenset({"get", "post", "put", "patch", "delete"})

# (path prefix, tag, description); the first matching prefix wins.
TAG_GROUPS = [
    (
        "/api/v1/auth/",
        "Authentication",
        "Register, log in, and exchange the chat session token.",
    ),
    ("/api/v1/schema", "Meta", "OpenAPI schema and docs."),
]


def tag_for(path: str) -> str | None:
    return next((tag for prefix, tag, _ in TAG_GROUPS if path.startswith(prefix)), None)


def group_tags(result: dict[str, Any], **kwargs: Any) -> dict[str, Any]:
    """Tag every versioned operation by feature and drop the bare root aliases.

    The root paths (``/login`` and friends) serve the same views as
    ``/api/v1/auth/*`` and would only duplicate operation ids in the docs.
    """
    paths = result.get("paths", {})
    for path in [p for p in paths if not p.startswith("/api/")]:
        del paths[path]

    for path, item in paths.items():
        tag = tag_for(path)
        if tag is None:
            continue
        for method, operation in item.items():
            if method in OPERATION_KEYS and isinstance(operation, dict):
                operation["tags"] = [tag]

    declared = {t.get("name") for t in result.get("tags", [])}
    tags = result.setdefault("tags", [])
    tags.extend(
        {"name": tag, "description": description}
        for _, tag, description in TAG_GROUPS
        if tag not in declared
    )
    return result
