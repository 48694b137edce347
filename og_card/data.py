"""Data describing a crate for OpenGraph image generation."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from og_card.errors import JsonSerializationError
from og_card.formatting import format_bytes, format_number, format_optional_number


@dataclass(frozen=True)
class OgImageAuthorData:
    """An author shown on the image, with an optional avatar URL."""

    name: str
    avatar: str | None = None

    @classmethod
    def with_url(cls, name: str, url: str) -> OgImageAuthorData:
        """Create an author whose avatar is downloaded from *url*."""
        return cls(name, str(url))


@dataclass(frozen=True, kw_only=True)
class OgImageData:
    """Everything needed to render the OpenGraph image of a crate."""

    name: str
    version: str
    description: str | None
    license: str | None
    tags: tuple[str, ...] = field(default_factory=tuple)
    authors: tuple[OgImageAuthorData, ...] = field(default_factory=tuple)
    lines_of_code: int | None
    crate_size: int
    releases: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "tags", tuple(self.tags))
        object.__setattr__(self, "authors", tuple(self.authors))

    def to_dict(self) -> dict[str, Any]:
        """Return the template input, with sizes and counts already formatted."""
        return {
            "name": self.name,
            "version": self.version,
            "description": self.description,
            "license": self.license,
            "tags": list(self.tags),
            "authors": [
                {"name": author.name, "avatar": author.avatar} for author in self.authors
            ],
            "lines_of_code": format_optional_number(self.lines_of_code),
            "crate_size": format_bytes(self.crate_size),
            "releases": format_number(self.releases),
        }

    def to_json(self) -> str:
        """Serialize the template input to compact JSON.

        Raises JsonSerializationError when a field cannot be serialized.
        """
        try:
            return json.dumps(
                self.to_dict(), ensure_ascii=False, separators=(",", ":")
            )
        except (TypeError, ValueError) as exc:
            raise JsonSerializationError(exc) from exc