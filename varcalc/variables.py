"""User variable store.

Names are case-sensitive and compared exactly. The store keeps creation order, which is the
order the display command lists variables in.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional, Tuple

from varcalc.errors import DuplicateDeclarationError, VariableNotFoundError

logger = logging.getLogger(__name__)


class VariableStore:
    """Mutable mapping of user variable name to float value."""

    def __init__(self):
        self._vars: Dict[str, float] = {}

    def __len__(self) -> int:
        return len(self._vars)

    def __iter__(self) -> Iterator[Tuple[str, float]]:
        return iter(list(self._vars.items()))

    def names(self) -> List[str]:
        return list(self._vars)

    def exists(self, name: str) -> bool:
        return name in self._vars

    def get(self, name: str) -> float:
        try:
            return self._vars[name]
        except KeyError:
            raise VariableNotFoundError(f"Tried to access non-existent user variable {name}") from None

    def declare_zero(self, name: str) -> None:
        """Create `name` with value 0. Fails if it already exists."""
        if name in self._vars:
            raise DuplicateDeclarationError(f"Tried to create an existing variable {name}")
        self._vars[name] = 0.0
        logger.info("declared %s = 0", name)

    def assign(self, name: str, value: float) -> Optional[float]:
        """Create or overwrite `name`. Returns the previous value, or None if it was created."""
        previous = self._vars.get(name)
        self._vars[name] = float(value)
        if previous is None:
            logger.info("created %s = %r", name, value)
        else:
            logger.info("updated %s: %r -> %r", name, previous, value)
        return previous

    def delete(self, name: str) -> None:
        if name not in self._vars:
            raise VariableNotFoundError(f"Cannot delete a variable that does not exist: {name}")
        del self._vars[name]
        logger.info("deleted %s", name)

    def delete_all(self) -> int:
        """Remove every variable; returns how many were removed."""
        count = len(self._vars)
        self._vars.clear()
        logger.info("cleared %d user variables", count)
        return count
