"""Thread resolver service.

See Also:
    [ThreadResolver][threadbrotr.services.resolver.service.ThreadResolver]:
        The orchestrating service.
"""

from .authors import AuthorDirectory, parse_profile
from .configs import (
    DEFAULT_RELAYS,
    ConcurrencyConfig,
    NetworksConfig,
    NetworkTypeConfig,
    ResolverConfig,
    TimeoutsConfig,
    TraversalLimitsConfig,
)
from .filters import ThreadFilter
from .formatter import format_thread, sort_replies
from .root import fetch_note, resolve_root
from .service import ThreadResolver
from .session import QueryOutcome, RelayResult, RelaySession, fold_results
from .types import ResolvedThread, RootResolution
from .walker import CollectedSet, ReplyGraphWalker


__all__ = [
    "DEFAULT_RELAYS",
    "AuthorDirectory",
    "CollectedSet",
    "ConcurrencyConfig",
    "NetworkTypeConfig",
    "NetworksConfig",
    "QueryOutcome",
    "RelayResult",
    "RelaySession",
    "ReplyGraphWalker",
    "ResolvedThread",
    "ResolverConfig",
    "RootResolution",
    "ThreadFilter",
    "ThreadResolver",
    "TimeoutsConfig",
    "TraversalLimitsConfig",
    "fetch_note",
    "fold_results",
    "format_thread",
    "parse_profile",
    "resolve_root",
    "sort_replies",
]
