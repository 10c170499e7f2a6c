"""Write the extraction artifact.

The artifact is a pretty-printed JSON array with one object per endpoint:
every :class:`~arielle.models.ExtractedInfo` field plus the rendered
``content`` that was (or would be) embedded. Files are named
``api-extraction_<YYYY-MM-DD_HH-MM-SS>.json`` and written atomically.
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from arielle.config import atomic_write
from arielle.models import EmbeddingDocument, ExtractedInfo

ARTIFACT_PREFIX = "api-extraction"


def generate_timestamp_filename(
    prefix: str = ARTIFACT_PREFIX,
    extension: str = "json",
    now: Optional[datetime] = None,
) -> str:
    """Return ``<prefix>_<YYYY-MM-DD_HH-MM-SS>.<extension>``."""
    stamp = (now or datetime.now()).strftime("%Y-%m-%d_%H-%M-%S")
    return f"{prefix}_{stamp}.{extension}"


def build_records(
    extracted: list[ExtractedInfo],
    documents: list[EmbeddingDocument],
) -> list[dict[str, Any]]:
    """Pair each extracted record with its rendered content (matched by id)."""
    content_by_id = {document.id: document.content for document in documents}
    return [
        {**info.model_dump(mode="json"), "content": content_by_id.get(info.id, "")}
        for info in extracted
    ]


def save_extraction(
    extracted: list[ExtractedInfo],
    documents: list[EmbeddingDocument],
    output_dir: Path,
    now: Optional[datetime] = None,
) -> Path:
    """Write the artifact under *output_dir* and return its path.

    Raises:
        OSError: If the directory cannot be created or the file written.
    """
    path = Path(output_dir) / generate_timestamp_filename(now=now)
    records = build_records(extracted, documents)
    atomic_write(path, json.dumps(records, indent=2, ensure_ascii=False) + "\n")
    return path
