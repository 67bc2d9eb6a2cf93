from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class ContentType:
    id: int
    name: str
    mime_type: str = "text/html"
    description: str = ""
    file_extensions: str = ""
    headers: list[str] = field(default_factory=list)
    binary: bool = False

    @property
    def primary_extension(self) -> str:
        for ext in self.file_extensions.split(","):
            ext = ext.strip()
            if ext:
                return ext if ext.startswith(".") else f".{ext}"
        return ""
