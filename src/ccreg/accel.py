"""Accelerator kinds and the ordered accelerator target list.

An :class:`AcceleratorCatalog` knows which accelerator names exist.  The
:class:`AcceleratorList` keeps the selection for code generation: insertion
ordered, duplicate free, and cleared by the ``RESET`` sentinel when the
selection arrives as a string.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

logger = logging.getLogger(__name__)

RESET_SENTINEL = "RESET"

_TOKEN_SPLIT = re.compile(r"[,\s]+")


class UnknownAcceleratorError(ValueError):
    """A token does not name a registered accelerator."""

    def __init__(self, token: str, known: Iterable[str]) -> None:
        self.token = token
        super().__init__(f"unknown accelerator {token!r} (known: {', '.join(known) or 'none'})")


@dataclass(frozen=True)
class Accelerator:
    """A pluggable code-generation target."""

    name: str

    def __str__(self) -> str:
        return self.name


NNPA = Accelerator("NNPA")

DEFAULT_ACCELERATORS: tuple[Accelerator, ...] = (NNPA,)


class AcceleratorCatalog:
    """Registered accelerator kinds, looked up case-insensitively."""

    def __init__(self, kinds: Iterable[Accelerator | str] = DEFAULT_ACCELERATORS) -> None:
        self._kinds: dict[str, Accelerator] = {}
        for kind in kinds:
            self.register(kind)

    def register(self, kind: Accelerator | str) -> Accelerator:
        """Add *kind* (idempotent) and return the registered instance."""
        if isinstance(kind, str):
            kind = Accelerator(kind)
        return self._kinds.setdefault(kind.name.upper(), kind)

    def get(self, name: str) -> Accelerator | None:
        return self._kinds.get(name.upper())

    def names(self) -> list[str]:
        return [k.name for k in self._kinds.values()]

    def __contains__(self, kind: object) -> bool:
        if isinstance(kind, Accelerator):
            return self._kinds.get(kind.name.upper()) == kind
        if isinstance(kind, str):
            return kind.upper() in self._kinds
        return False

    def __iter__(self) -> Iterator[Accelerator]:
        return iter(self._kinds.values())


_default_catalog: AcceleratorCatalog | None = None


def default_catalog() -> AcceleratorCatalog:
    """Process-wide catalog shared by every list built without its own."""
    global _default_catalog
    if _default_catalog is None:
        _default_catalog = AcceleratorCatalog()
    return _default_catalog


def split_tokens(text: str) -> list[str]:
    """Split an accelerator string on commas and/or whitespace."""
    return [tok for tok in _TOKEN_SPLIT.split(text.strip()) if tok]


class AcceleratorList:
    """Ordered, duplicate-free accelerator selection."""

    def __init__(self, catalog: AcceleratorCatalog | None = None) -> None:
        self.catalog = catalog if catalog is not None else default_catalog()
        self._selected: list[Accelerator] = []

    def add(self, kind: Accelerator) -> None:
        """Append *kind* unless already selected."""
        if kind not in self._selected:
            self._selected.append(kind)
            logger.debug("accelerator %s selected", kind.name)

    def reset(self) -> None:
        self._selected.clear()
        logger.debug("accelerator selection reset")

    def apply(self, text: str) -> None:
        """Apply a string of tokens in order, all or nothing.

        ``RESET`` clears everything selected so far, including kinds added
        earlier in the same string.

        Raises:
            UnknownAcceleratorError: a token is neither ``RESET`` nor a
                registered accelerator; the selection is left unchanged.
        """
        staged = list(self._selected)
        for token in split_tokens(text):
            if token == RESET_SENTINEL:
                staged.clear()
                continue
            kind = self.catalog.get(token)
            if kind is None:
                raise UnknownAcceleratorError(token, self.catalog.names())
            if kind not in staged:
                staged.append(kind)
        if staged != self._selected:
            logger.debug("accelerator selection %s -> %s", self.render(), _join(staged))
        self._selected = staged

    def render(self) -> str:
        """Canonical form: names joined by ``","`` in insertion order."""
        return _join(self._selected)

    def kinds(self) -> list[Accelerator]:
        return list(self._selected)

    def __len__(self) -> int:
        return len(self._selected)

    def __iter__(self) -> Iterator[Accelerator]:
        return iter(list(self._selected))

    def __contains__(self, kind: object) -> bool:
        return kind in self._selected


def _join(kinds: Iterable[Accelerator]) -> str:
    return ",".join(k.name for k in kinds)
