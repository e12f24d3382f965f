"""Auxiliary compiler config map.

Open-ended ``key -> list[str]`` store for build metadata that has no slot in
the option catalog, e.g. the shared libraries a model build depends on::

    ccm = CompilerConfigMap()
    ccm.add(SHARED_LIB_DEPS, ["libzdnn.so"])
    ccm.get(SHARED_LIB_DEPS)        # ["libzdnn.so"]

Values keep insertion order and multiplicity.  ``delete`` removes every
occurrence of each named value; a key whose list becomes empty is dropped, so
``get`` on it returns ``[]`` just like for a key never added.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

logger = logging.getLogger(__name__)

SHARED_LIB_DEPS = "sharedLibDeps"


class CompilerConfigMap:
    def __init__(self) -> None:
        self._entries: dict[str, list[str]] = {}

    def get(self, key: str) -> list[str]:
        """Return a copy of the values for *key* (``[]`` when absent)."""
        return list(self._entries.get(key, ()))

    def add(self, key: str, values: Iterable[str]) -> None:
        values = list(values)
        self._entries.setdefault(key, []).extend(values)
        logger.debug("config %s += %s", key, values)

    def delete(self, key: str, values: Iterable[str]) -> None:
        current = self._entries.get(key)
        if current is None:
            return
        drop = set(values)
        kept = [v for v in current if v not in drop]
        if kept:
            self._entries[key] = kept
        else:
            del self._entries[key]
        logger.debug("config %s -= %s", key, sorted(drop))

    def keys(self) -> list[str]:
        return list(self._entries)

    def as_dict(self) -> dict[str, list[str]]:
        return {k: list(v) for k, v in self._entries.items()}

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self._entries)
