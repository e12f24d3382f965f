"""Command-line flag grammar for compiler options.

Turns argv-style tokens into ``(OptionKind, value)`` pairs that can be fed to
:meth:`CompilerRegistry.set_compiler_options`.  The same grammar is used for
the ``CCREG_FLAGS`` environment variable, which supplies default flags that
explicit command-line flags override.

Accepted forms::

    --mcpu=z16   -mcpu=z16   --mcpu z16
    -O3  --O3                            optimization level
    --verbose   --no-verbose   --verbose=false
    --maccel=NNPA --maccel=RESET         repeated; applied in order
"""

from __future__ import annotations

import os
import re
import shlex
from collections.abc import Iterable, Mapping

from ccreg.options import (
    OPTION_SPECS,
    OptionKind,
    OptionSpec,
    ValueKind,
    spec_for,
)
from ccreg.registry import CompilerRegistry, Status

ENV_OPTIONS_NAME = "CCREG_FLAGS"

_OPT_LEVEL_FLAG = re.compile(r"^--?(O[0-3])$")
_FLAG_SPECS: dict[str, OptionSpec] = {spec.flag: spec for spec in OPTION_SPECS}


class FlagError(ValueError):
    """An argv token is not a recognised compiler flag."""


def _strip_dashes(token: str) -> str | None:
    if token.startswith("--"):
        return token[2:]
    if token.startswith("-") and len(token) > 1:
        return token[1:]
    return None


def parse_flags(argv: Iterable[str]) -> list[tuple[OptionKind, str]]:
    """Parse *argv* into option pairs, preserving order.

    Raises:
        FlagError: unknown flag, positional argument, or missing value.
    """
    tokens = list(argv)
    pairs: list[tuple[OptionKind, str]] = []
    i = 0
    while i < len(tokens):
        token = tokens[i]
        i += 1

        m = _OPT_LEVEL_FLAG.match(token)
        if m:
            pairs.append((OptionKind.OPT_LEVEL, m.group(1)))
            continue

        body = _strip_dashes(token)
        if not body:
            raise FlagError(f"unexpected argument {token!r}")

        name, eq, value = body.partition("=")
        spec = _FLAG_SPECS.get(name)

        if spec is None and name.startswith("no-") and not eq:
            negated = _FLAG_SPECS.get(name[3:])
            if negated is not None and negated.value_kind is ValueKind.BOOL:
                pairs.append((negated.kind, "false"))
                continue

        if spec is None or (spec.kind is OptionKind.OPT_LEVEL and not eq):
            raise FlagError(f"unknown compiler flag {token!r}")

        if not eq:
            if spec.value_kind is ValueKind.BOOL:
                value = "true"
            elif i < len(tokens):
                value = tokens[i]
                i += 1
            else:
                raise FlagError(f"flag {token!r} expects a value")

        pairs.append((spec.kind, value))
    return pairs


def options_from_env(environ: Mapping[str, str] | None = None) -> list[tuple[OptionKind, str]]:
    """Parse the flags held in ``CCREG_FLAGS`` (empty when unset)."""
    if environ is None:
        environ = os.environ
    raw = environ.get(ENV_OPTIONS_NAME, "")
    if not raw.strip():
        return []
    try:
        argv = shlex.split(raw)
    except ValueError as exc:
        raise FlagError(f"{ENV_OPTIONS_NAME}: {exc}") from exc
    return parse_flags(argv)


def apply_flags(
    registry: CompilerRegistry,
    argv: Iterable[str],
    *,
    use_env: bool = True,
    environ: Mapping[str, str] | None = None,
) -> Status:
    """Commit environment flags, then *argv*, into *registry*.

    Both sources are parsed before anything is applied, so a grammar error
    leaves the registry untouched.  Value errors short-circuit like
    :meth:`CompilerRegistry.set_compiler_options`.
    """
    pairs = options_from_env(environ) if use_env else []
    pairs += parse_flags(argv)
    return registry.set_compiler_options(pairs)


def to_flags(registry: CompilerRegistry) -> list[str]:
    """Render the options that differ from their defaults back into argv form."""
    argv = []
    for kind, value in registry.changed_options().items():
        if kind is OptionKind.OPT_LEVEL:
            argv.append(registry.get_optimization_level_option())
        elif kind is OptionKind.TARGET_ACCEL:
            argv.extend(f"--maccel={a.name}" for a in registry.get_target_accels())
        else:
            argv.append(f"--{spec_for(kind).flag}={value}")
    return argv

