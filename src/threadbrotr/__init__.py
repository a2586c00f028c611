r"""ThreadBrotr -- Nostr thread reconstruction from unreliable relays.

Decodes a NIP-19 reference, finds the thread root, walks the reply graph
breadth-first across several relays with deduplication and hard ceilings,
enriches authors with kind-0 profiles, and renders a flat-text block.

Architecture follows a **diamond DAG** dependency structure where imports
flow strictly downward:

```text
              services         Thread resolution orchestration
             /   |   \
          core  nips  utils    Logging, errors, metrics, NIP decoding, client helpers
             \   |   /
              models           Pure frozen dataclasses (zero I/O)
```

Note:
    Top-level imports (``from threadbrotr import ThreadResolver``) use lazy
    loading and resolve on first access.
"""

import importlib
from importlib.metadata import version as _get_version


__version__ = _get_version("threadbrotr")

__all__ = [
    "Logger",
    "NetworkType",
    "Note",
    "Profile",
    "Relay",
    "ResolvedThread",
    "ResolverConfig",
    "ThreadReference",
    "ThreadResolver",
    "decode_reference",
]

_LAZY_IMPORTS: dict[str, tuple[str, str]] = {
    "Logger": ("threadbrotr.core", "Logger"),
    "NetworkType": ("threadbrotr.models", "NetworkType"),
    "Note": ("threadbrotr.models", "Note"),
    "Profile": ("threadbrotr.models", "Profile"),
    "Relay": ("threadbrotr.models", "Relay"),
    "ThreadReference": ("threadbrotr.nips", "ThreadReference"),
    "decode_reference": ("threadbrotr.nips", "decode_reference"),
    "ResolvedThread": ("threadbrotr.services", "ResolvedThread"),
    "ResolverConfig": ("threadbrotr.services", "ResolverConfig"),
    "ThreadResolver": ("threadbrotr.services", "ThreadResolver"),
}


def __getattr__(name: str) -> object:
    if name in _LAZY_IMPORTS:
        module_path, attr_name = _LAZY_IMPORTS[name]
        module = importlib.import_module(module_path)
        value = getattr(module, attr_name)
        globals()[name] = value
        return value
    raise AttributeError(f"module 'threadbrotr' has no attribute {name!r}")


def __dir__() -> list[str]:
    return __all__
