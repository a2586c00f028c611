"""Thread resolver configuration models.

Every field has a default, so an empty YAML file (or no file at all) yields
a working configuration against the five default public relays.

Examples:
    ```yaml
    relays:
      - wss://relay.damus.io
      - wss://nos.lol
    limits:
      max_depth: 3
    networks:
      tor:
        enabled: true  # Inherits default proxy_url
    ```

See Also:
    [ThreadResolver][threadbrotr.services.resolver.service.ThreadResolver]:
        The service class that consumes these configurations.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from threadbrotr.core.metrics import MetricsConfig
from threadbrotr.models.constants import EVENT_KIND_MAX, EventKind, NetworkType
from threadbrotr.models.relay import Relay


DEFAULT_RELAYS: tuple[str, ...] = (
    "wss://relay.damus.io",
    "wss://nos.lol",
    "wss://relay.snort.social",
    "wss://relay.nostr.band",
    "wss://nostr.wine",
)


# =============================================================================
# Network Configuration
# =============================================================================


class NetworkTypeConfig(BaseModel):
    """Per-network switch and SOCKS5 proxy."""

    enabled: bool = False
    proxy_url: str | None = None


class ClearnetConfig(NetworkTypeConfig):
    enabled: bool = True


class TorConfig(NetworkTypeConfig):
    proxy_url: str | None = "socks5://127.0.0.1:9050"


class I2pConfig(NetworkTypeConfig):
    proxy_url: str | None = "socks5://127.0.0.1:4447"


class LokiConfig(NetworkTypeConfig):
    proxy_url: str | None = "socks5://127.0.0.1:1080"


class NetworksConfig(BaseModel):
    """Which relay networks may be contacted, and through which proxy.

    Clearnet is enabled by default. Overlay networks are disabled until
    explicitly switched on; relay hints pointing at a disabled network are
    skipped by the session.
    """

    clearnet: ClearnetConfig = Field(default_factory=ClearnetConfig)
    tor: TorConfig = Field(default_factory=TorConfig)
    i2p: I2pConfig = Field(default_factory=I2pConfig)
    loki: LokiConfig = Field(default_factory=LokiConfig)

    def get(self, network: NetworkType) -> NetworkTypeConfig:
        return getattr(self, network.value, self.clearnet)

    def is_enabled(self, network: NetworkType) -> bool:
        return self.get(network).enabled

    def get_proxy_url(self, network: NetworkType) -> str | None:
        """Proxy for an enabled overlay network; ``None`` for clearnet."""
        if network == NetworkType.CLEARNET:
            return None
        config = self.get(network)
        return config.proxy_url if config.enabled else None


# =============================================================================
# Traversal, Timeouts, Concurrency
# =============================================================================


class TraversalLimitsConfig(BaseModel):
    """Hard ceilings on reply graph expansion.

    Note:
        ``max_total`` bounds the collected set (root excluded);
        ``per_query_limit`` is sent to relays as the filter ``limit`` and
        relays are free to return fewer.
    """

    max_depth: int = Field(default=2, ge=1, le=10, description="BFS levels below the root")
    per_query_limit: int = Field(default=500, ge=1, le=5_000, description="Filter limit per query")
    batch_size: int = Field(default=150, ge=1, le=500, description="Event ids per #e filter")
    max_total: int = Field(default=2_000, ge=1, le=20_000, description="Collected replies ceiling")


class TimeoutsConfig(BaseModel):
    """Per-relay time budgets in seconds."""

    connect: float = Field(default=5.0, ge=0.5, le=60.0, description="WebSocket connect timeout")
    request: float = Field(default=10.0, ge=0.5, le=120.0, description="Per-relay query budget")


class ConcurrencyConfig(BaseModel):
    max_parallel_relays: int = Field(default=10, ge=1, le=100)


# =============================================================================
# Resolver Configuration
# =============================================================================


class ResolverConfig(BaseModel):
    """Complete thread resolver configuration.

    See Also:
        [RelaySession][threadbrotr.services.resolver.session.RelaySession]:
            Reads ``relays``, ``timeouts``, ``concurrency`` and ``networks``.
        [ReplyGraphWalker][threadbrotr.services.resolver.walker.ReplyGraphWalker]:
            Reads ``limits`` and ``post_kinds``.
    """

    relays: list[str] = Field(default_factory=lambda: list(DEFAULT_RELAYS), min_length=1)
    limits: TraversalLimitsConfig = Field(default_factory=TraversalLimitsConfig)
    timeouts: TimeoutsConfig = Field(default_factory=TimeoutsConfig)
    concurrency: ConcurrencyConfig = Field(default_factory=ConcurrencyConfig)
    networks: NetworksConfig = Field(default_factory=NetworksConfig)
    post_kinds: list[int] = Field(default_factory=lambda: [int(EventKind.TEXT_NOTE)], min_length=1)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)

    @field_validator("relays", mode="after")
    @classmethod
    def validate_relays(cls, v: list[str]) -> list[str]:
        """Normalize every relay URL and drop duplicates, keeping order."""
        normalized: list[str] = []
        for url in v:
            relay = Relay(url)
            if relay.url not in normalized:
                normalized.append(relay.url)
        return normalized

    @field_validator("post_kinds", mode="after")
    @classmethod
    def validate_post_kinds(cls, v: list[int]) -> list[int]:
        for kind in v:
            if not 0 <= kind <= EVENT_KIND_MAX:
                raise ValueError(f"Event kind {kind} out of valid range (0-{EVENT_KIND_MAX})")
            if kind == EventKind.SET_METADATA:
                raise ValueError("Kind 0 is profile metadata, not a post kind")
        return v

    @property
    def default_relays(self) -> tuple[Relay, ...]:
        return tuple(Relay(url) for url in self.relays)
