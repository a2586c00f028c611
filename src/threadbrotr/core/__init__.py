"""Core layer: exceptions, structured logging, metrics, and YAML loading.

Sits in the middle of the diamond DAG -- depends on nothing else in
ThreadBrotr and is used by ``threadbrotr.services`` and the CLI.

Attributes:
    Logger: Structured logger supporting key=value and JSON output modes.
        See [Logger][threadbrotr.core.logger.Logger].
    MetricsConfig: Toggle for Prometheus metric recording.
        See [MetricsConfig][threadbrotr.core.metrics.MetricsConfig].
    load_yaml: Safe YAML loading with ``yaml.safe_load()``.
        See [load_yaml()][threadbrotr.core.yaml.load_yaml].
"""

from .exceptions import (
    ConfigurationError,
    ConnectivityError,
    InvalidReferenceError,
    ProfileUnparseableError,
    ProtocolError,
    RelaySetUnreachableError,
    RelayTimeoutError,
    RelayUnavailableError,
    RootNotFoundError,
    ThreadBrotrError,
)
from .logger import Logger, StructuredFormatter, format_kv_pairs
from .metrics import (
    COLLECTED_EVENTS,
    RELAY_QUERIES,
    RESOLUTION_DURATION_SECONDS,
    MetricsConfig,
    record_relay_query,
    record_resolution,
)
from .yaml import load_yaml


__all__ = [
    "COLLECTED_EVENTS",
    "RELAY_QUERIES",
    "RESOLUTION_DURATION_SECONDS",
    "ConfigurationError",
    "ConnectivityError",
    "InvalidReferenceError",
    "Logger",
    "MetricsConfig",
    "ProfileUnparseableError",
    "ProtocolError",
    "RelaySetUnreachableError",
    "RelayTimeoutError",
    "RelayUnavailableError",
    "RootNotFoundError",
    "StructuredFormatter",
    "ThreadBrotrError",
    "format_kv_pairs",
    "load_yaml",
    "record_relay_query",
    "record_resolution",
]
