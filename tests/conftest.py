import sys
import types
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
COMPONENT = ROOT / "custom_components" / "videohub_panel"


def _ensure_package(name: str, path: Path) -> None:
    """Register a package path without executing its ``__init__``.

    The integration's ``__init__`` needs Home Assistant; the protocol library
    under ``lib/`` does not, so tests import it through a bare package module.
    """
    if name in sys.modules:
        return
    module = types.ModuleType(name)
    module.__path__ = [str(path)]
    sys.modules[name] = module
    parent, _, child = name.rpartition(".")
    if parent in sys.modules:
        setattr(sys.modules[parent], child, module)


if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

_ensure_package("custom_components", ROOT / "custom_components")
_ensure_package("custom_components.videohub_panel", COMPONENT)
