"""ccreg — compiler configuration registry.

A single source of truth for the switches that steer a multi-stage native
compiler: target triple/CPU/arch, optimization level, accelerator targets,
pass-through optimizer and code-generator flags, instrumentation, and an
auxiliary key/value-list map for build metadata.
"""

from ccreg.accel import RESET_SENTINEL as RESET_SENTINEL
from ccreg.accel import Accelerator as Accelerator
from ccreg.accel import AcceleratorCatalog as AcceleratorCatalog
from ccreg.config_map import SHARED_LIB_DEPS as SHARED_LIB_DEPS
from ccreg.options import OptionKind as OptionKind
from ccreg.options import OptLevel as OptLevel
from ccreg.registry import CompilerRegistry as CompilerRegistry
from ccreg.registry import Status as Status
from ccreg.registry import get_registry as get_registry

__version__ = "0.1.0"
