"""
Precision configuration for the commodity kernel.

Responsibility:
    Holds the process-wide precision settings consulted by the registry and
    the operation dispatcher, and loads them (plus per-commodity display
    flags) from a YAML settings document.

Architecture position:
    Kernel > Config -- imported by the domain layer. Has no dependency on
    the domain; ``apply_settings`` receives the registry it configures.

Invariants enforced:
    - Settings are replaced atomically as one frozen object; readers always
      see a complete, validated ``PrecisionSettings``.
    - Precisions are non-negative integers.

Failure modes:
    - ``ConfigurationError`` for negative or non-integer precisions and for
      malformed settings documents.
    - ``FileNotFoundError`` / ``yaml.YAMLError`` propagate from loading.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from commodity_kernel.exceptions import ConfigurationError
from commodity_kernel.logging_config import get_logger

if TYPE_CHECKING:
    from commodity_kernel.domain.commodity import CommodityRegistry

logger = get_logger("config")

DEFAULT_DISPLAY_PRECISION = 3
EXTRA_PRECISION = 6


@dataclass(frozen=True)
class PrecisionSettings:
    """Process-wide precision knobs."""

    default_display_precision: int = DEFAULT_DISPLAY_PRECISION
    extra_precision: int = EXTRA_PRECISION

    def __post_init__(self) -> None:
        _check_precision("default_display_precision", self.default_display_precision)
        _check_precision("extra_precision", self.extra_precision)


@dataclass(frozen=True)
class CommoditySettings:
    """Explicit display configuration for one commodity symbol."""

    symbol: str
    prefixed: bool = False
    connected: bool = False
    thousand_marks: bool = False


@dataclass(frozen=True)
class KernelSettings:
    """A parsed settings document."""

    precision: PrecisionSettings = field(default_factory=PrecisionSettings)
    commodities: tuple[CommoditySettings, ...] = ()


def _check_precision(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(name, value, "must be an integer")
    if value < 0:
        raise ConfigurationError(name, value, "must be non-negative")


# ---------------------------------------------------------------------------
# Process-wide state
# ---------------------------------------------------------------------------

_settings = PrecisionSettings()
_lock = threading.Lock()


def get_precision_settings() -> PrecisionSettings:
    """Return the active precision settings."""
    return _settings


def configure_precision(
    *,
    default_display_precision: int | None = None,
    extra_precision: int | None = None,
) -> PrecisionSettings:
    """Replace the active settings. Omitted fields keep their current value."""
    global _settings
    with _lock:
        current = _settings
        _settings = PrecisionSettings(
            default_display_precision=(
                current.default_display_precision
                if default_display_precision is None
                else default_display_precision
            ),
            extra_precision=(
                current.extra_precision if extra_precision is None else extra_precision
            ),
        )
        updated = _settings
    logger.info(
        "precision_configured",
        extra={
            "default_display_precision": updated.default_display_precision,
            "extra_precision": updated.extra_precision,
        },
    )
    return updated


def reset_precision() -> None:
    """Restore default settings. FOR TESTING ONLY."""
    global _settings
    with _lock:
        _settings = PrecisionSettings()


# ---------------------------------------------------------------------------
# Settings documents
# ---------------------------------------------------------------------------


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_settings(data: dict[str, Any]) -> KernelSettings:
    """
    Parse a settings document.

    Preconditions:
        - ``data`` is a mapping with optional ``precision`` and
          ``commodities`` sections.
    Raises:
        ConfigurationError: on wrong section types or invalid precisions.
    """
    if not isinstance(data, dict):
        raise ConfigurationError("<document>", data, "must be a mapping")

    precision_data = data.get("precision") or {}
    if not isinstance(precision_data, dict):
        raise ConfigurationError("precision", precision_data, "must be a mapping")
    precision = PrecisionSettings(
        default_display_precision=precision_data.get(
            "default_display_precision", DEFAULT_DISPLAY_PRECISION
        ),
        extra_precision=precision_data.get("extra_precision", EXTRA_PRECISION),
    )

    commodity_data = data.get("commodities") or {}
    if not isinstance(commodity_data, dict):
        raise ConfigurationError("commodities", commodity_data, "must be a mapping")
    commodities = []
    for symbol, options in sorted(commodity_data.items()):
        options = options or {}
        if not isinstance(options, dict):
            raise ConfigurationError(f"commodities.{symbol}", options, "must be a mapping")
        commodities.append(
            CommoditySettings(
                symbol=str(symbol),
                prefixed=bool(options.get("prefixed", False)),
                connected=bool(options.get("connected", False)),
                thousand_marks=bool(options.get("thousand_marks", False)),
            )
        )

    return KernelSettings(precision=precision, commodities=tuple(commodities))


def load_settings(path: Path) -> KernelSettings:
    """Load and parse a YAML settings document."""
    settings = parse_settings(load_yaml_file(path))
    logger.debug(
        "settings_loaded",
        extra={"path": str(path), "commodity_count": len(settings.commodities)},
    )
    return settings


def apply_settings(settings: KernelSettings, registry: CommodityRegistry) -> None:
    """
    Install the precision block and the per-commodity display options.

    Placement options only take effect for commodities not yet interned;
    thousand marks are always applied.
    """
    configure_precision(
        default_display_precision=settings.precision.default_display_precision,
        extra_precision=settings.precision.extra_precision,
    )
    for entry in settings.commodities:
        commodity = registry.intern(
            entry.symbol, prefixed=entry.prefixed, connected=entry.connected
        )
        registry.set_thousand_marks(commodity, entry.thousand_marks)
