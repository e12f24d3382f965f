"""Compiler option registry — the single source of truth for compiler switches.

A :class:`CompilerRegistry` owns one slot per :class:`~ccreg.options.OptionKind`,
the accelerator target list and the auxiliary config map.  Values enter and
leave through their canonical strings::

    reg = CompilerRegistry()
    reg.set_compiler_option(OptionKind.OPT_LEVEL, "o3")    # Status.OK
    reg.get_compiler_option(OptionKind.OPT_LEVEL)          # "O3"
    reg.set_compiler_option("mcpu", "z16")                 # flag names work too
    reg.set_compiler_option(OptionKind.OPT_LEVEL, "fast")  # Status.MALFORMED_VALUE

Failures never raise: every setter returns a :class:`Status` and leaves the
slot untouched when the value is rejected.  Unset options read back as their
catalog default.

Threading
~~~~~~~~~
The registry is single-writer.  Setters, ``add``/``del`` and ``reset`` must
all be called from one thread; readers on that same thread are always safe.
There is no internal locking, so a host that shares a registry between
threads must guard the whole object with its own lock.

Embedding hosts that want one process-wide instance use :func:`get_registry`;
everything else should construct its own registry and pass it along.
"""

from __future__ import annotations

import enum
import logging
import shlex
from collections.abc import Iterable
from typing import Any

from ccreg.accel import (
    Accelerator,
    AcceleratorCatalog,
    AcceleratorList,
    UnknownAcceleratorError,
)
from ccreg.config_map import CompilerConfigMap
from ccreg.options import (
    OPTION_SPECS,
    MalformedValueError,
    OptionKind,
    OptLevel,
    ValueKind,
    lookup_kind,
    parse_value,
    render_value,
    spec_for,
)

logger = logging.getLogger(__name__)

CompilerOptionList = list[tuple[OptionKind | str, str]]


class Status(enum.IntEnum):
    """Result of a registry mutation; ``OK`` is zero, failures are not."""

    OK = 0
    UNKNOWN_OPTION = 1
    MALFORMED_VALUE = 2
    UNKNOWN_ACCELERATOR = 3


class CompilerRegistry:
    """Option slots, accelerator selection and config map for one compiler run."""

    def __init__(self, accelerators: AcceleratorCatalog | None = None) -> None:
        self._values: dict[OptionKind, Any] = {}
        self._accels = AcceleratorList(accelerators)
        self.compiler_config = CompilerConfigMap()

    @property
    def accelerator_catalog(self) -> AcceleratorCatalog:
        return self._accels.catalog

    # ------------------------------------------------------------------
    # Generic facade
    # ------------------------------------------------------------------

    def set_compiler_option(self, kind: OptionKind | str, value: str) -> Status:
        """Parse *value* for *kind* and commit it.

        ``TargetAccel`` adds to the accelerator selection instead of
        overwriting it; ``"RESET"`` clears it.
        """
        resolved = lookup_kind(kind)
        if resolved is None:
            logger.debug("rejected unknown option %r", kind)
            return Status.UNKNOWN_OPTION
        if resolved is OptionKind.TARGET_ACCEL:
            return self.set_target_accel(value)
        spec = spec_for(resolved)
        try:
            parsed = parse_value(spec, value)
        except MalformedValueError as exc:
            logger.debug("rejected %s=%r: %s", spec.name, value, exc)
            return Status.MALFORMED_VALUE
        self._values[resolved] = parsed
        logger.debug("%s = %r", spec.name, parsed)
        return Status.OK

    def set_compiler_options(self, options: Iterable[tuple[OptionKind | str, str]]) -> Status:
        """Apply pairs in order, stopping at the first failure.

        Options applied before the failing pair stay committed.
        """
        for kind, value in options:
            status = self.set_compiler_option(kind, value)
            if status != Status.OK:
                return status
        return Status.OK

    def get_compiler_option(self, kind: OptionKind | str) -> str:
        """Canonical string for *kind*'s current value (default when unset).

        Raises:
            KeyError: *kind* is a string the catalog does not know.
        """
        resolved = lookup_kind(kind)
        if resolved is None:
            raise KeyError(f"unknown option kind {kind!r}")
        if resolved is OptionKind.TARGET_ACCEL:
            return self.get_target_accel()
        return render_value(spec_for(resolved), self.get_value(resolved))

    def get_value(self, kind: OptionKind) -> Any:
        """Native value for *kind*: ``str``, ``int``, ``bool``, ``OptLevel``, ..."""
        if kind is OptionKind.TARGET_ACCEL:
            return tuple(self._accels.kinds())
        return self._values.get(kind, spec_for(kind).default)

    def is_set(self, kind: OptionKind) -> bool:
        if kind is OptionKind.TARGET_ACCEL:
            return len(self._accels) > 0
        return kind in self._values

    def snapshot(self) -> dict[str, str]:
        """Every option's canonical string, keyed by option name, in catalog order."""
        return {spec.name: self.get_compiler_option(spec.kind) for spec in OPTION_SPECS}

    def changed_options(self) -> dict[OptionKind, str]:
        """Options whose current value differs from the catalog default."""
        changed = {}
        for spec in OPTION_SPECS:
            current = self.get_compiler_option(spec.kind)
            if current != render_value(spec, spec.default):
                changed[spec.kind] = current
        return changed

    # ------------------------------------------------------------------
    # Typed accessors
    # ------------------------------------------------------------------

    def set_target_triple(self, triple: str) -> Status:
        return self.set_compiler_option(OptionKind.TARGET_TRIPLE, triple)

    def get_target_triple(self) -> str:
        return self.get_value(OptionKind.TARGET_TRIPLE)

    def set_target_arch(self, arch: str) -> Status:
        return self.set_compiler_option(OptionKind.TARGET_ARCH, arch)

    def get_target_arch(self) -> str:
        return self.get_value(OptionKind.TARGET_ARCH)

    def set_target_cpu(self, cpu: str) -> Status:
        return self.set_compiler_option(OptionKind.TARGET_CPU, cpu)

    def get_target_cpu(self) -> str:
        return self.get_value(OptionKind.TARGET_CPU)

    def set_opt_level(self, level: OptLevel | str) -> Status:
        if isinstance(level, OptLevel):
            level = level.value
        return self.set_compiler_option(OptionKind.OPT_LEVEL, level)

    def get_opt_level(self) -> OptLevel:
        return self.get_value(OptionKind.OPT_LEVEL)

    def get_optimization_level_option(self) -> str:
        """Flag form of the optimization level, e.g. ``-O2``."""
        return self.get_opt_level().flag

    def set_xopt_option(self, flags: str) -> Status:
        return self.set_compiler_option(OptionKind.OPT_FLAG, flags)

    def get_xopt_option(self) -> str:
        return self.get_value(OptionKind.OPT_FLAG)

    def set_xllc_option(self, flags: str) -> Status:
        return self.set_compiler_option(OptionKind.LLC_FLAG, flags)

    def get_xllc_option(self) -> str:
        return self.get_value(OptionKind.LLC_FLAG)

    def set_llvm_option(self, flags: str) -> Status:
        return self.set_compiler_option(OptionKind.LLVM_FLAG, flags)

    def get_llvm_option(self) -> str:
        return self.get_value(OptionKind.LLVM_FLAG)

    def set_verbose(self, verbose: bool = True) -> Status:
        return self.set_compiler_option(OptionKind.VERBOSE, "true" if verbose else "false")

    def is_verbose(self) -> bool:
        return self.get_value(OptionKind.VERBOSE)

    def split_flags(self, kind: OptionKind) -> list[str]:
        """Split a pass-through flag string into argv tokens.

        Falls back to whitespace splitting when the string has unbalanced
        quotes.
        """
        if spec_for(kind).value_kind is not ValueKind.STRING:
            raise TypeError(f"{kind} is not a string option")
        flags = self.get_value(kind)
        try:
            return shlex.split(flags)
        except ValueError:
            return flags.split()

    # ------------------------------------------------------------------
    # Accelerators
    # ------------------------------------------------------------------

    def set_target_accel(self, accel: str | Accelerator) -> Status:
        """Add accelerators to the selection.

        A string may hold several tokens; ``"RESET"`` clears the selection
        before the tokens that follow it.  An :class:`Accelerator` always
        succeeds; a kind the catalog lacks is registered first so its
        rendering parses back.
        """
        if isinstance(accel, Accelerator):
            self._accels.add(self.accelerator_catalog.register(accel))
            return Status.OK
        if not isinstance(accel, str):
            return Status.MALFORMED_VALUE
        try:
            self._accels.apply(accel)
        except UnknownAcceleratorError as exc:
            logger.debug("rejected accelerator string %r: %s", accel, exc)
            return Status.UNKNOWN_ACCELERATOR
        return Status.OK

    def reset_target_accel(self) -> None:
        self._accels.reset()

    def get_target_accel(self) -> str:
        return self._accels.render()

    def get_target_accels(self) -> list[Accelerator]:
        return self._accels.kinds()

    # ------------------------------------------------------------------
    # Auxiliary config map
    # ------------------------------------------------------------------

    def get_compiler_config(self, key: str) -> list[str]:
        return self.compiler_config.get(key)

    def add_compiler_config(self, key: str, values: Iterable[str]) -> None:
        self.compiler_config.add(key, values)

    def del_compiler_config(self, key: str, values: Iterable[str]) -> None:
        self.compiler_config.delete(key, values)


# ---------------------------------------------------------------------------
# Process-wide instance
# ---------------------------------------------------------------------------

_registry: CompilerRegistry | None = None


def get_registry() -> CompilerRegistry:
    """Return the process-wide registry, creating it on first use."""
    global _registry
    if _registry is None:
        _registry = CompilerRegistry()
    return _registry


def reset_registry() -> None:
    """Drop the process-wide registry so the next :func:`get_registry` starts clean."""
    global _registry
    _registry = None
