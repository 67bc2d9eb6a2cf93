from __future__ import annotations

from enum import Enum


class ElementClass(str, Enum):
    CHUNK = "chunk"
    SNIPPET = "snippet"
    TEMPLATE = "template"
    PLUGIN = "plugin"
    TV = "tv"
