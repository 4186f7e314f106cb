"""Bookmark data model."""

from dataclasses import dataclass, field
from typing import Any, Dict, List


def clean_title(title: str) -> str:
    """Trim a title and drop line breaks."""
    return "".join(c for c in title.strip() if c not in "\n\r")


@dataclass(order=True)
class Bookmark:
    """A single saved URL. Ordering follows the id."""
    id: int
    archived: bool = field(default=False, compare=False)
    name: str = field(default="", compare=False)
    url: str = field(default="", compare=False)
    tags: List[str] = field(default_factory=list, compare=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Bookmark":
        """Create a Bookmark from a data file record.

        Raises:
            ValueError: If a required field is missing.
        """
        try:
            return cls(
                id=int(data["id"]),
                archived=bool(data.get("archived", False)),
                name=str(data["name"]),
                url=str(data["url"]),
                tags=list(data.get("tags", [])),
            )
        except KeyError as e:
            raise ValueError(f"bookmark record is missing field {e}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "archived": self.archived,
            "name": self.name,
            "url": self.url,
            "tags": list(self.tags),
        }
