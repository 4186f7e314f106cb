"""Stores data structures related to the item database's storage unit."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

_INVALID_CHARS = "\n\t\r"
_NULL_CONTEXTS = (".void", ".none", "")


class ItemState(Enum):
    """Whether an item is actionable (to do / done) or a note."""
    TODO = "Todo"
    DONE = "Done"
    NOTE = "Note"


def validate_text(text: str) -> str:
    """Drop characters that are not allowed in names and contexts."""
    return "".join(c for c in text if c not in _INVALID_CHARS)


def context_translates_to_null(context: str) -> bool:
    """Check whether a context string means "no context"."""
    return context.lower() in _NULL_CONTEXTS


def validate_context(context: Optional[str]) -> Optional[str]:
    if context is None or context_translates_to_null(context):
        return None
    return validate_text(context)


@dataclass
class Item:
    """The main data unit of the item database.

    ``ref_id`` is a short id, reused as items get done; items that are done
    have none. ``internal_id`` is unique for the whole life of the database.
    """
    name: str
    state: ItemState
    ref_id: Optional[int]
    internal_id: int
    description: str = ""
    children: List["Item"] = field(default_factory=list)
    context: Optional[str] = None

    def __post_init__(self):
        self.name = validate_text(self.name)
        self.context = validate_context(self.context)

    @property
    def display_id(self) -> int:
        return self.ref_id if self.ref_id is not None else self.internal_id

    def set_name(self, name: str):
        self.name = validate_text(name)

    def set_context(self, context: str):
        self.context = validate_context(context)

    def walk(self) -> Iterator["Item"]:
        """Yield this item and all its descendants, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def has_descendant(self, other: "Item") -> bool:
        """Check whether ``other`` sits anywhere below this item."""
        return any(d is other for child in self.children for d in child.walk())

    def label(self) -> str:
        """Short identification used in error messages: ``"name" (R#1, I#4)``."""
        ref = f"R#{self.ref_id}, " if self.ref_id is not None else ""
        return f"{self.name!r} ({ref}I#{self.internal_id})"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Item":
        try:
            state = ItemState(data["state"])
        except ValueError:
            raise ValueError(f"unknown item state {data['state']!r}")
        except KeyError as e:
            raise ValueError(f"item record is missing field {e}")

        try:
            return cls(
                name=str(data["name"]),
                state=state,
                ref_id=data.get("ref_id"),
                internal_id=int(data["internal_id"]),
                description=str(data.get("description", "")),
                children=[cls.from_dict(c) for c in data.get("children", [])],
                context=data.get("context"),
            )
        except KeyError as e:
            raise ValueError(f"item record is missing field {e}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "state": self.state.value,
            "ref_id": self.ref_id,
            "internal_id": self.internal_id,
            "description": self.description,
            "children": [c.to_dict() for c in self.children],
            "context": self.context,
        }
