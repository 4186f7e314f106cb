"""Stores data structures related to displaying the item database on a terminal."""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, List, Optional

import click

from .models import Item, ItemState

ItemFilter = Optional[Callable[[Item], bool]]

STATE_MARKERS = {
    ItemState.TODO: "o",
    ItemState.DONE: "x",
    ItemState.NOTE: "-",
}


class ReportDepth(Enum):
    """How much of each item's subtree is shown."""
    SHALLOW = "shallow"  # only the item itself
    BRIEF = "brief"      # the item, its first child and a count of the rest
    TREE = "tree"        # the whole subtree


@dataclass
class ReportConfig:
    spaces_per_indent: int = 2


def not_done(item: Item) -> bool:
    return item.state != ItemState.DONE


def _passes(item: Item, item_filter: ItemFilter) -> bool:
    return item_filter is None or item_filter(item)


class BasicReport:
    """Indented listing: ``<marker> [<id>] (D) @context name``."""

    def __init__(self, config: Optional[ReportConfig] = None):
        self.config = config or ReportConfig()

    def _indent(self, level: int) -> str:
        return " " * (self.config.spaces_per_indent * level)

    def format_item(self, item: Item, level: int = 0) -> str:
        description = " (D)" if item.description else ""
        context = f" @{item.context}" if item.context is not None else ""
        return (
            f"{self._indent(level)}{STATE_MARKERS[item.state]} [{item.display_id:02}]"
            f"{description}{context} {item.name}"
        )

    def item_lines(self, item: Item, depth: ReportDepth, level: int, item_filter: ItemFilter) -> List[str]:
        if not _passes(item, item_filter):
            return []

        lines = [self.format_item(item, level)]
        if depth == ReportDepth.SHALLOW:
            return lines

        if depth == ReportDepth.TREE:
            for child in item.children:
                lines.extend(self.item_lines(child, ReportDepth.TREE, level + 1, item_filter))
            return lines

        visible = [c for c in item.children if _passes(c, item_filter)]
        if visible:
            lines.append(self.format_item(visible[0], level + 1))
        if len(visible) > 1:
            lines.append(f"{self._indent(level)}  {len(visible) - 1} more...")
        return lines

    def lines(self, title: str, items: Iterable[Item], depth: ReportDepth = ReportDepth.TREE,
              item_filter: ItemFilter = None) -> List[str]:
        items = list(items)
        lines = [f"{title} | {len(items)} selected items"]
        for item in items:
            lines.extend(self.item_lines(item, depth, 0, item_filter))
        return lines

    def report(self, title: str, items: Iterable[Item], depth: ReportDepth = ReportDepth.TREE,
               item_filter: ItemFilter = None, out=None):
        """Print the report (standard output unless ``out`` is given)."""
        for line in self.lines(title, items, depth, item_filter):
            click.echo(line, file=out)


class FlatReport(BasicReport):
    """One line per visible item, with its full path of names."""

    def item_lines(self, item: Item, depth: ReportDepth, level: int, item_filter: ItemFilter,
                   parents: tuple = ()) -> List[str]:
        if not _passes(item, item_filter):
            return []

        path = parents + (item.name,)
        lines = [f"{item.display_id:>4} {' / '.join(path)}"]
        for child in item.children:
            lines.extend(self.item_lines(child, depth, level + 1, item_filter, path))
        return lines
