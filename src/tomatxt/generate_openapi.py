"""
Utility script to generate and write the OpenAPI schema for the FastAPI app.

The desktop presentation client is generated against this schema, so it is
written to interfaces/openapi.json at the repository root where client
tooling can consume it without running the server.

Usage:
    python -m tomatxt.generate_openapi
"""
from __future__ import annotations

import json
import os
from typing import Any, Dict, List, Optional

from .logger import get_logger
from .main import app, openapi_tags

logger = get_logger(__name__)


def _ensure_tags(schema: Dict[str, Any]) -> None:
    """
    Ensure the OpenAPI schema carries every tag from ``openapi_tags`` without
    overriding tag definitions already present.
    """
    existing_tags: List[Dict[str, Any]] = schema.get("tags", []) or []
    existing_names = {t.get("name") for t in existing_tags if isinstance(t, dict)}
    for tag in openapi_tags:
        if tag.get("name") not in existing_names:
            existing_tags.append(tag)
    if existing_tags:
        schema["tags"] = existing_tags


def _default_interfaces_dir() -> str:
    # <repo_root>/src/tomatxt/generate_openapi.py -> <repo_root>/interfaces
    src_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    return os.path.join(os.path.dirname(src_dir), "interfaces")


# PUBLIC_INTERFACE
def generate_openapi(output_dir: Optional[str] = None) -> str:
    """Write the OpenAPI schema to ``<output_dir>/openapi.json`` and return the file path."""
    schema = app.openapi()
    _ensure_tags(schema)

    interfaces_dir = output_dir or _default_interfaces_dir()
    os.makedirs(interfaces_dir, exist_ok=True)
    out_path = os.path.join(interfaces_dir, "openapi.json")

    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(schema, f, indent=2, ensure_ascii=False)
    logger.info(f"Wrote OpenAPI schema to: {out_path}")
    return out_path


if __name__ == "__main__":
    generate_openapi()
