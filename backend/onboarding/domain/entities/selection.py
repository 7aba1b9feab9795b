"""Set-valued client selections and the pure reconciliation diff."""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum


class RelationKind(str, Enum):
    """Join relations between a client and a catalog."""

    SERVICES = "services"
    PRODUCTS = "products"


@dataclass(frozen=True)
class SelectionDiff:
    """Row changes that turn the current selection into the desired one."""

    to_delete: frozenset[int]
    to_insert: frozenset[int]

    @property
    def is_empty(self) -> bool:
        return not self.to_delete and not self.to_insert


def diff_selection(desired: Iterable[int], current: Iterable[int]) -> SelectionDiff:
    """Compute the minimal delete/insert sets.

    Ids present in both sets are left alone, so rows that stay selected are
    never deleted and re-created. Duplicates in either input collapse.
    """
    desired_set = frozenset(desired)
    current_set = frozenset(current)
    return SelectionDiff(
        to_delete=current_set - desired_set,
        to_insert=desired_set - current_set,
    )
