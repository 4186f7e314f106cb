"""Hierarchical item manager (itmn)."""

from .models import Item, ItemState, context_translates_to_null
from .manager import ItemChanges, ItemManager, NewOwner, OwnerKind, ProgramResult
from .report import BasicReport, FlatReport, ReportConfig, ReportDepth, not_done

__all__ = [
    'Item',
    'ItemState',
    'context_translates_to_null',
    'ItemChanges',
    'ItemManager',
    'NewOwner',
    'OwnerKind',
    'ProgramResult',
    'BasicReport',
    'FlatReport',
    'ReportConfig',
    'ReportDepth',
    'not_done',
]
