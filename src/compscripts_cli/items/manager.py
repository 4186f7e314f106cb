"""Stores data structures related to managing the item database."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Optional, Set, Tuple

from ..core.data import (
    dump_json_array, find_highest_free_value, find_lowest_free_value,
    load_json_array, write_text,
)
from ..core.errors import CompscriptsError, RepeatedIdError
from .models import Item, ItemState, context_translates_to_null


@dataclass
class ProgramResult:
    """The outcome of a command: whether to save, and the exit status."""
    should_save: bool
    exit_status: int = 0


@dataclass
class ItemChanges:
    """A batch modification applied to every selected item."""
    name: Optional[str] = None
    context: Optional[str] = None
    note: Optional[bool] = None

    def describe(self) -> List[str]:
        """Human-readable list of the changes that will be made."""
        changes = []
        if self.name is not None:
            changes.append(f"Change name to {self.name!r}")
        if self.context is not None:
            if context_translates_to_null(self.context):
                changes.append("Remove context")
            else:
                changes.append(f"Change context to {self.context!r}")
        if self.note is True:
            changes.append("Transform into a note")
        elif self.note is False:
            changes.append("Transform into an actionable item (task)")
        return changes

    def apply(self, item: Item):
        if self.name is not None:
            item.set_name(self.name)
        if self.context is not None:
            item.set_context(self.context)
        if self.note is True:
            item.state = ItemState.NOTE
        elif self.note is False and item.state == ItemState.NOTE:
            # done/todo items are left alone
            item.state = ItemState.TODO


class OwnerKind(Enum):
    ROOT = "root"
    REF = "ref"
    INTERNAL = "internal"


@dataclass(frozen=True)
class NewOwner:
    """Target of an ownership change: ``.ROOT``, ``<ref id>`` or ``i<internal id>``."""
    kind: OwnerKind
    id: Optional[int] = None

    @classmethod
    def parse(cls, arg: str) -> "NewOwner":
        if arg == ".ROOT":
            return cls(OwnerKind.ROOT)
        if arg.startswith("i"):
            digits = arg[1:]
            if not digits.isdigit():
                raise CompscriptsError(f"invalid number after 'i' character: {digits!r}")
            return cls(OwnerKind.INTERNAL, int(digits))
        if arg.isdigit():
            return cls(OwnerKind.REF, int(arg))
        raise CompscriptsError(f"invalid expression: {arg!r}")


class ItemManager:
    """The item database: a forest of items plus the sets of ids in use."""

    def __init__(self, data: Iterable[Item]):
        self.data: List[Item] = list(data)
        self.ref_ids: Set[int] = set()
        self.internal_ids: Set[int] = set()

        for item in self.walk():
            if item.ref_id is not None:
                if item.ref_id in self.ref_ids:
                    raise RepeatedIdError(item.ref_id, "reference ID")
                self.ref_ids.add(item.ref_id)

            if item.internal_id in self.internal_ids:
                raise RepeatedIdError(item.internal_id, "internal ID")
            self.internal_ids.add(item.internal_id)

        # Live surface items always get a reference id.
        for item in self.data:
            if item.state != ItemState.DONE and item.ref_id is None:
                item.ref_id = find_lowest_free_value(self.ref_ids)
                self.ref_ids.add(item.ref_id)

    @classmethod
    def from_json(cls, contents: str) -> "ItemManager":
        return cls(Item.from_dict(r) for r in load_json_array(contents))

    def to_json(self) -> str:
        return dump_json_array(i.to_dict() for i in self.data)

    def save(self, path: Path):
        write_text(path, self.to_json())

    def walk(self) -> Iterator[Item]:
        for item in self.data:
            yield from item.walk()

    def find(self, ref_id: int) -> Optional[Item]:
        """Depth-first search by reference id."""
        return next((i for i in self.walk() if i.ref_id == ref_id), None)

    def find_internal(self, internal_id: int) -> Optional[Item]:
        """Depth-first search by internal id."""
        return next((i for i in self.walk() if i.internal_id == internal_id), None)

    def get(self, ref_id: int) -> Item:
        item = self.find(ref_id)
        if item is None:
            raise CompscriptsError(f"could not find item with RefId = {ref_id}")
        return item

    def _locate(self, target: Item) -> Tuple[List[Item], int]:
        """Find the list holding ``target`` and its index in it."""
        def search(items):
            for index, item in enumerate(items):
                if item is target:
                    return items, index
                found = search(item.children)
                if found:
                    return found
            return None

        found = search(self.data)
        if found is None:
            raise CompscriptsError(f"item {target.label()} is not in the database")
        return found

    def _new_item(self, name, context, state, description, children) -> Item:
        ref_id = find_lowest_free_value(self.ref_ids)
        internal_id = find_highest_free_value(self.internal_ids)
        self.ref_ids.add(ref_id)
        self.internal_ids.add(internal_id)
        return Item(
            name=name,
            state=state,
            ref_id=ref_id,
            internal_id=internal_id,
            description=description,
            children=list(children),
            context=context,
        )

    def add_item_on_root(self, name: str, context: str = "", state: ItemState = ItemState.TODO,
                         description: str = "", children: Iterable[Item] = ()) -> int:
        """Add an item to the surface. Returns its reference id."""
        item = self._new_item(name, context, state, description, children)
        self.data.append(item)
        return item.ref_id

    def add_child(self, parent_ref: int, name: str, context: str = "", state: ItemState = ItemState.TODO,
                  description: str = "", children: Iterable[Item] = ()) -> int:
        """Add an item under the item with ``parent_ref``. Returns the new reference id."""
        parent = self.get(parent_ref)
        item = self._new_item(name, context, state, description, children)
        parent.children.append(item)
        return item.ref_id

    def surface_ref_ids(self) -> List[int]:
        return [i.ref_id for i in self.data if i.ref_id is not None]

    def surface_items(self) -> List[Item]:
        return [i for i in self.data if i.ref_id is not None]

    def first_invalid_ref_id(self, ids: Iterable[int]) -> Optional[int]:
        for ref_id in ids:
            if self.find(ref_id) is None:
                return ref_id
        return None

    def try_remove(self, ref_id: int) -> Optional[Item]:
        """Detach an item (with its subtree) and return it, or None if absent."""
        item = self.find(ref_id)
        if item is None:
            return None
        container, index = self._locate(item)
        return container.pop(index)

    def delete(self, ref_ids: Iterable[int]):
        """Remove the selected items and their subtrees.

        Ids that disappear along with an already deleted ancestor are ignored.
        """
        selection = set(ref_ids)

        def prune(items: List[Item]) -> List[Item]:
            kept = []
            for item in items:
                if item.ref_id is not None and item.ref_id in selection:
                    for gone in item.walk():
                        self.ref_ids.discard(gone.ref_id)
                    continue
                item.children = prune(item.children)
                kept.append(item)
            return kept

        self.data = prune(self.data)

    def swap(self, first_ref: int, second_ref: int):
        """Exchange the positions of two items; each keeps its children."""
        first = self.find(first_ref)
        if first is None:
            raise CompscriptsError("first query could not be found")
        second = self.find(second_ref)
        if second is None:
            raise CompscriptsError("second query could not be found")
        if first is second:
            raise CompscriptsError("first and second queries are the same item")
        if first.has_descendant(second) or second.has_descendant(first):
            raise CompscriptsError("one of the items is a descendant of the other")

        first_list, first_index = self._locate(first)
        second_list, second_index = self._locate(second)
        first_list[first_index], second_list[second_index] = second, first

    def change_state(self, ref_id: int, mapper: Callable[[ItemState], ItemState]):
        """Map an item's state; items that become done lose their reference id."""
        item = self.get(ref_id)
        new_state = mapper(item.state)
        if new_state == ItemState.DONE and item.ref_id is not None:
            self.ref_ids.discard(item.ref_id)
            item.ref_id = None
        item.state = new_state

    def resolve_owner(self, owner: NewOwner) -> Optional[Item]:
        """Find the item named by ``owner`` (None means the root)."""
        if owner.kind == OwnerKind.ROOT:
            return None
        if owner.kind == OwnerKind.INTERNAL:
            item = self.find_internal(owner.id)
            if item is None:
                raise CompscriptsError(f"could not find item with InternalId = {owner.id}")
            return item
        return self.get(owner.id)

    def validate_ownership_change(self, ref_ids: List[int], owner_item: Optional[Item]):
        """Reject moves that would put an item under itself.

        Raises:
            CompscriptsError: If the owner is selected, or a selected item is
                a descendant of another selected item.
        """
        items = [self.get(r) for r in dict.fromkeys(ref_ids)]

        for item in items:
            if owner_item is not None and item is owner_item:
                raise CompscriptsError(f"item {item.label()} is on selection and is the new owner")

        for parent in items:
            for child in items:
                if parent is not child and parent.has_descendant(child):
                    raise CompscriptsError(
                        "parent-child conflict:\n"
                        f"let item A = {child.label()}, and\n"
                        f"    item B = {parent.label()}.\n"
                        "A is a child of B, but both A and B are on the selection."
                    )

        if owner_item is not None:
            for item in items:
                if item.has_descendant(owner_item):
                    raise CompscriptsError(
                        f"the new owner {owner_item.label()} is a child of {item.label()}, which is on the selection"
                    )

    def change_ownership(self, ref_ids: List[int], owner: NewOwner):
        """Move the selected items (with their children) under a new owner."""
        owner_item = self.resolve_owner(owner)
        self.validate_ownership_change(ref_ids, owner_item)

        moved = [self.try_remove(r) for r in dict.fromkeys(ref_ids)]
        if owner_item is None:
            self.data.extend(moved)
        else:
            owner_item.children.extend(moved)
