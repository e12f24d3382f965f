"""Option catalog — every named compiler switch the registry knows about.

Each :class:`OptionKind` has exactly one :class:`OptionSpec` row describing
its value kind, its default, the flag name used on the command line, and the
category it is listed under.  The codecs in this module translate between an
option's external string form and its native Python value:

    parse_value(spec, "o2")      -> OptLevel.O2
    render_value(spec, OptLevel.O2) -> "O2"

Accelerator lists are handled by :mod:`ccreg.accel`; the codecs here only
know that such options exist.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any


class MalformedValueError(ValueError):
    """A string could not be converted to an option's value kind."""


class OptionCategory(enum.Enum):
    """Listing label for an option."""

    COMPILER = "compiler"  # compiler driver only
    COMMON = "common"  # shared between the compiler and optimizer drivers


class ValueKind(enum.Enum):
    STRING = "string"
    INT = "int"
    BOOL = "bool"
    OPT_LEVEL = "opt-level"
    ACCEL_LIST = "accel-list"
    INSTRUMENT_SET = "instrument-set"


class OptLevel(enum.Enum):
    """Optimization level; the value is the canonical spelling."""

    O0 = "O0"
    O1 = "O1"
    O2 = "O2"
    O3 = "O3"

    def __str__(self) -> str:
        return self.value

    @property
    def flag(self) -> str:
        """Command-line form, e.g. ``-O2``."""
        return f"-{self.value}"


class InstrumentAction(enum.Enum):
    """Instrumentation bits; declaration order is the rendering order."""

    BEFORE_OP = "before-op"
    AFTER_OP = "after-op"
    REPORT_TIME = "report-time"
    REPORT_MEMORY = "report-memory"


class OptionKind(enum.Enum):
    TARGET_TRIPLE = "TargetTriple"
    TARGET_ARCH = "TargetArch"
    TARGET_CPU = "TargetCPU"
    TARGET_ACCEL = "TargetAccel"
    OPT_LEVEL = "OptLevel"
    OPT_FLAG = "OPTFlag"
    LLC_FLAG = "LLCFlag"
    LLVM_FLAG = "LLVMFlag"
    VERBOSE = "Verbose"
    INSTRUMENT_OPS = "InstrumentOps"
    INSTRUMENT_CONTROL = "InstrumentControl"
    ENABLE_MEMORY_BUNDLING = "EnableMemoryBundling"
    OP_TRANSFORM_THRESHOLD = "OpTransformThreshold"
    OP_TRANSFORM_REPORT = "OpTransformReport"
    REPEAT_TRANSFORM = "RepeatTransform"
    SHAPE_INFORMATION = "ShapeInformation"
    PRESERVE_LOCATIONS = "PreserveLocations"
    PRESERVE_BITCODE = "PreserveBitcode"
    PRESERVE_LLVM_IR = "PreserveLLVMIR"
    PRESERVE_MLIR = "PreserveMLIR"
    PRINT_IR = "PrintIR"
    USE_MODEL_TYPES = "UseModelTypes"
    INVOKE_VERSION_CONVERTER = "InvokeVersionConverter"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class OptionSpec:
    """Static description of one option slot."""

    kind: OptionKind
    value_kind: ValueKind
    default: Any
    flag: str
    category: OptionCategory
    help: str = ""

    @property
    def name(self) -> str:
        return self.kind.value


_C = OptionCategory.COMPILER
_M = OptionCategory.COMMON

OPTION_SPECS: list[OptionSpec] = [
    OptionSpec(OptionKind.TARGET_TRIPLE, ValueKind.STRING, "", "mtriple", _M,
               "Override target triple for module."),
    OptionSpec(OptionKind.TARGET_ARCH, ValueKind.STRING, "", "march", _M,
               "Target architecture to generate code for."),
    OptionSpec(OptionKind.TARGET_CPU, ValueKind.STRING, "", "mcpu", _M,
               "Target CPU to generate code for."),
    OptionSpec(OptionKind.TARGET_ACCEL, ValueKind.ACCEL_LIST, (), "maccel", _M,
               "Accelerators to generate code for (RESET clears the list)."),
    OptionSpec(OptionKind.OPT_LEVEL, ValueKind.OPT_LEVEL, OptLevel.O0, "O", _M,
               "Optimization level: O0, O1, O2 or O3."),
    OptionSpec(OptionKind.OPT_FLAG, ValueKind.STRING, "", "Xopt", _C,
               "Flags passed verbatim to the optimizer."),
    OptionSpec(OptionKind.LLC_FLAG, ValueKind.STRING, "", "Xllc", _C,
               "Flags passed verbatim to the code generator."),
    OptionSpec(OptionKind.LLVM_FLAG, ValueKind.STRING, "", "mllvm", _C,
               "Flags passed verbatim to both the optimizer and code generator."),
    OptionSpec(OptionKind.VERBOSE, ValueKind.BOOL, False, "verbose", _C,
               "Print the commands run by the compiler driver."),
    OptionSpec(OptionKind.INSTRUMENT_OPS, ValueKind.STRING, "", "instrument-ops", _M,
               "Comma-separated list of operations to instrument ('ALL' for every op)."),
    OptionSpec(OptionKind.INSTRUMENT_CONTROL, ValueKind.INSTRUMENT_SET, frozenset(),
               "instrument-control", _M,
               "Instrumentation actions: before-op, after-op, report-time, report-memory."),
    OptionSpec(OptionKind.ENABLE_MEMORY_BUNDLING, ValueKind.BOOL, True,
               "enable-memory-bundling", _M, "Bundle small buffer allocations."),
    OptionSpec(OptionKind.OP_TRANSFORM_THRESHOLD, ValueKind.INT, 3,
               "op-transform-threshold", _M,
               "Maximum number of repeated op-level transformation rounds."),
    OptionSpec(OptionKind.OP_TRANSFORM_REPORT, ValueKind.BOOL, False,
               "op-transform-report", _M, "Report op-level transformation diagnostics."),
    OptionSpec(OptionKind.REPEAT_TRANSFORM, ValueKind.INT, 0, "repeat-transform", _C,
               "Number of extra rounds of graph-level transformations."),
    OptionSpec(OptionKind.SHAPE_INFORMATION, ValueKind.STRING, "", "shape-information", _C,
               "Static input shapes, e.g. '0:1x10x20,1:7x5x3'."),
    OptionSpec(OptionKind.PRESERVE_LOCATIONS, ValueKind.BOOL, False,
               "preserve-locations", _C, "Emit source locations in intermediate files."),
    OptionSpec(OptionKind.PRESERVE_BITCODE, ValueKind.BOOL, False,
               "preserve-bitcode", _C, "Keep the generated bitcode file."),
    OptionSpec(OptionKind.PRESERVE_LLVM_IR, ValueKind.BOOL, False,
               "preserve-llvmir", _C, "Keep the generated textual LLVM IR."),
    OptionSpec(OptionKind.PRESERVE_MLIR, ValueKind.BOOL, False,
               "preserve-mlir", _C, "Keep the generated MLIR."),
    OptionSpec(OptionKind.PRINT_IR, ValueKind.BOOL, False, "print-ir", _C,
               "Print the IR after lowering."),
    OptionSpec(OptionKind.USE_MODEL_TYPES, ValueKind.BOOL, False,
               "use-model-types", _C, "Use element types declared by the input model."),
    OptionSpec(OptionKind.INVOKE_VERSION_CONVERTER, ValueKind.BOOL, False,
               "invoke-version-converter", _C,
               "Upgrade the input model to the current opset before lowering."),
]

SPECS: dict[OptionKind, OptionSpec] = {spec.kind: spec for spec in OPTION_SPECS}
_BY_NAME: dict[str, OptionKind] = {spec.name: spec.kind for spec in OPTION_SPECS}
_BY_FLAG: dict[str, OptionKind] = {spec.flag: spec.kind for spec in OPTION_SPECS}


def lookup_kind(name: OptionKind | str) -> OptionKind | None:
    """Resolve an enum member, enum value (``"TargetCPU"``) or flag (``"mcpu"``).

    Returns ``None`` for names the catalog does not know.
    """
    if isinstance(name, OptionKind):
        return name
    if not isinstance(name, str):
        return None
    return _BY_NAME.get(name) or _BY_FLAG.get(name)


def spec_for(kind: OptionKind) -> OptionSpec:
    return SPECS[kind]


# ---------------------------------------------------------------------------
# Codecs
# ---------------------------------------------------------------------------

_TRUE = frozenset({"true", "1", "yes", "on"})
_FALSE = frozenset({"false", "0", "no", "off"})


def parse_opt_level(value: str) -> OptLevel:
    """Accept ``O2``, ``o2`` or ``-O2``."""
    token = value.strip().lstrip("-").upper()
    try:
        return OptLevel(token)
    except ValueError:
        choices = ", ".join(level.value for level in OptLevel)
        raise MalformedValueError(
            f"unknown optimization level {value!r} (expected one of {choices})"
        ) from None


def parse_bool(value: str) -> bool:
    token = value.strip().lower()
    if token in _TRUE:
        return True
    if token in _FALSE:
        return False
    raise MalformedValueError(f"expected a boolean, got {value!r}")


def parse_int(value: str) -> int:
    try:
        return int(value.strip(), 10)
    except ValueError:
        raise MalformedValueError(f"expected an integer, got {value!r}") from None


def parse_instrument_set(value: str) -> frozenset[InstrumentAction]:
    actions = set()
    for token in value.replace(",", " ").split():
        try:
            actions.add(InstrumentAction(token.lower()))
        except ValueError:
            raise MalformedValueError(f"unknown instrumentation action {token!r}") from None
    return frozenset(actions)


def render_instrument_set(actions: frozenset[InstrumentAction]) -> str:
    return ",".join(a.value for a in InstrumentAction if a in actions)


def parse_value(spec: OptionSpec, value: str) -> Any:
    """Convert *value* to the native type of *spec*.

    Raises:
        MalformedValueError: *value* does not fit the option's value kind.
        TypeError: *spec* is an accelerator list (see :mod:`ccreg.accel`).
    """
    if not isinstance(value, str):
        raise MalformedValueError(f"{spec.name} expects a string, got {type(value).__name__}")
    vk = spec.value_kind
    if vk is ValueKind.STRING:
        return value
    if vk is ValueKind.INT:
        return parse_int(value)
    if vk is ValueKind.BOOL:
        return parse_bool(value)
    if vk is ValueKind.OPT_LEVEL:
        return parse_opt_level(value)
    if vk is ValueKind.INSTRUMENT_SET:
        return parse_instrument_set(value)
    raise TypeError(f"{spec.name} values are parsed by the accelerator list")


def render_value(spec: OptionSpec, value: Any) -> str:
    """Render a native value back to its canonical string."""
    vk = spec.value_kind
    if vk is ValueKind.BOOL:
        return "true" if value else "false"
    if vk is ValueKind.INT:
        return str(int(value))
    if vk is ValueKind.OPT_LEVEL:
        return value.value
    if vk is ValueKind.INSTRUMENT_SET:
        return render_instrument_set(value)
    if vk is ValueKind.ACCEL_LIST:
        return ",".join(a.name for a in value)
    return value
