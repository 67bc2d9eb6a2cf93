from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True)
class Resource:
    id: int
    pagetitle: str
    alias: str
    parent: int = 0
    is_folder: bool = False
    content_type: int = 1
    uri: str = ""
    published: bool = False
    deleted: bool = False
    editedby: int = 0
    editedon: datetime | None = None


def build_uri(
    alias: str,
    *,
    parent_path: str = "",
    is_folder: bool = False,
    extension: str = "",
    container_suffix: str = "/",
) -> str:
    """Build a friendly URI for a resource from its alias and parent path.

    ``parent_path`` is the already-built URI of the parent container.
    """
    base = parent_path
    if base and not base.endswith(container_suffix):
        base = base + container_suffix
    if is_folder:
        return f"{base}{alias}{container_suffix}"
    return f"{base}{alias}{extension}"
