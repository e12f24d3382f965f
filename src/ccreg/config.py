"""Option files — seed a registry from ``ccreg.toml``.

An option file has two tables.  ``[options]`` is keyed by flag name
(``mcpu``) or option name (``TargetCPU``); ``[config]`` holds auxiliary
config map entries::

    [options]
    mtriple = "s390x-ibm-loz"
    O = "O3"
    maccel = ["NNPA"]
    verbose = true

    [config]
    sharedLibDeps = ["libzdnn.so"]

Usage::

    from ccreg.config import apply_options_file

    status = apply_options_file(registry, Path("ccreg.toml"))

:func:`dump_toml` goes the other way and renders a registry in the same
format (non-default options only) using tomlkit.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import tomlkit

from ccreg.options import OptionKind, lookup_kind, spec_for
from ccreg.registry import CompilerRegistry, Status

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomllib  # type: ignore[import]
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore[import,no-redef]

OPTIONS_FILE_NAME = "ccreg.toml"


@dataclass
class OptionsFile:
    """Parsed contents of an option file."""

    path: Path
    options: List[Tuple[OptionKind, str]] = field(default_factory=list)
    config: Dict[str, List[str]] = field(default_factory=dict)


def _stringify(value: Any) -> str:
    """TOML scalars become the strings the option codecs expect."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def find_options_file(start: Optional[Path] = None) -> Optional[Path]:
    """Walk up from *start* (or cwd) looking for ``ccreg.toml``."""
    candidate = (start or Path.cwd()).resolve()
    while True:
        path = candidate / OPTIONS_FILE_NAME
        if path.is_file():
            return path
        if candidate == candidate.parent:
            return None
        candidate = candidate.parent


def load_options_file(path: Path) -> OptionsFile:
    """Read an option file.

    List values under ``[options]`` expand to one pair per element, which is
    how several accelerators are selected.

    Raises:
        FileNotFoundError: *path* does not exist.
        KeyError: an ``[options]`` key names no known option.
        tomllib.TOMLDecodeError: the file is not valid TOML.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Option file not found: {path}")
    with open(path, "rb") as f:
        raw = tomllib.load(f)

    result = OptionsFile(path=path)
    for key, value in raw.get("options", {}).items():
        kind = lookup_kind(key)
        if kind is None:
            raise KeyError(f"{path.name}: unknown option {key!r}")
        values = value if isinstance(value, list) else [value]
        result.options.extend((kind, _stringify(v)) for v in values)

    for key, value in raw.get("config", {}).items():
        values = value if isinstance(value, list) else [value]
        result.config[key] = [_stringify(v) for v in values]
    return result


def apply_options_file(registry: CompilerRegistry, path: Path) -> Status:
    """Load *path* and commit its options and config entries into *registry*.

    Config entries are only added when every option was accepted.
    """
    loaded = load_options_file(path)
    status = registry.set_compiler_options(loaded.options)
    if status != Status.OK:
        return status
    for key, values in loaded.config.items():
        registry.add_compiler_config(key, values)
    return Status.OK


def dump_toml(registry: CompilerRegistry) -> str:
    """Render *registry* as an option file that :func:`load_options_file` reads back."""
    doc = tomlkit.document()
    doc.add(tomlkit.comment("Resolved compiler options (non-default values only)"))

    options = tomlkit.table()
    for kind, value in registry.changed_options().items():
        flag = spec_for(kind).flag
        if kind is OptionKind.TARGET_ACCEL:
            options.add(flag, [a.name for a in registry.get_target_accels()])
        else:
            options.add(flag, value)
    doc.add("options", options)

    config = tomlkit.table()
    for key, values in registry.compiler_config.as_dict().items():
        config.add(key, values)
    doc.add("config", config)
    return tomlkit.dumps(doc)
