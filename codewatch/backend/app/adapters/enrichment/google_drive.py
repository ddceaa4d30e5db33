# app/adapters/enrichment/google_drive.py
from __future__ import annotations

import re
from typing import Any

import httpx

from ...config import settings
from ...domain.errors import EnrichmentBranchError
from ...domain.parsing import to_str
from ...domain.types import ImageRef
from ..clients.http_resilience import resilient_request

# Drive's `name contains` is token-based; punctuation just hurts recall
_TOKEN_RE = re.compile(r"[^a-z0-9 ]+")


def _drive_quote(s: str) -> str:
    return "'" + s.replace("\\", "\\\\").replace("'", "\\'") + "'"


def build_drive_query(query: str, folder_id: str) -> str:
    clauses = [
        f"{_drive_quote(folder_id)} in parents",
        "mimeType contains 'image/'",
        "trashed = false",
    ]
    # house number + street name is enough; city/state rarely appear in file names
    tokens = _TOKEN_RE.sub(" ", query.lower()).split()[:3]
    for t in tokens:
        clauses.append(f"name contains {_drive_quote(t)}")
    return " and ".join(clauses)


def _to_image(item: dict[str, Any]) -> ImageRef | None:
    file_id = to_str(item.get("id"))
    if not file_id:
        return None
    return ImageRef(
        id=file_id,
        name=to_str(item.get("name")) or file_id,
        thumbnail_link=to_str(item.get("thumbnailLink")),
        web_view_link=to_str(item.get("webViewLink")),
    )


async def find_property_image(query: str) -> ImageRef | None:
    """
    Look up a property photo in the shared Drive folder.

    Not configured -> None (the integrations map tells the caller why).
    """
    if not (settings.GOOGLE_DRIVE_API_KEY and settings.GOOGLE_DRIVE_FOLDER_ID):
        return None

    q = query.strip()
    if not q:
        return None

    url = f"{settings.GOOGLE_DRIVE_BASE_URL.rstrip('/')}/files"
    params = {
        "q": build_drive_query(q, settings.GOOGLE_DRIVE_FOLDER_ID),
        "key": settings.GOOGLE_DRIVE_API_KEY,
        "fields": "files(id,name,thumbnailLink,webViewLink)",
        "pageSize": 5,
        "orderBy": "modifiedTime desc",
        "supportsAllDrives": "true",
        "includeItemsFromAllDrives": "true",
    }

    try:
        resp = await resilient_request("GET", url, params=params)
        body = resp.json()
    except (httpx.HTTPError, ValueError) as e:
        raise EnrichmentBranchError("image", f"{type(e).__name__}: {e}") from e

    if not isinstance(body, dict):
        return None

    for item in body.get("files") or []:
        if isinstance(item, dict):
            img = _to_image(item)
            if img is not None:
                return img
    return None
