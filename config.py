"""
config.py — Engine tunables and optional YAML overrides.

Defaults live in module-level constants; MenuConfig groups them so a menu
can be built from code or from a YAML file:

    layout:
      menu_distance: 60
      bubble_radius: 50
    return_to_rest:
      easing: curve
      curve: ease_out_cubic
      duration_ticks: 12
    scheduler:
      logic_rate_hz: 20
      ui_rate_hz: 60
"""

from dataclasses import dataclass, field

import dacite
import yaml

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULT_BUBBLE_RADIUS  = 50.0
DEFAULT_MENU_DISTANCE  = 60.0
ROTATION_DIVISOR       = 4.0     # ring starts at -pi/ROTATION_DIVISOR
BASE_SPACING           = 130.0   # minimum ring radius
EDGE_MARGIN            = 40.0    # horizontal gap kept from the screen edges

COLLISION_MARGIN       = 10.0
COINCIDENT_NUDGE       = 1.0

EASING_FACTOR          = 0.1
REST_THRESHOLD         = 1.0
CURVE_DURATION_TICKS   = 12

LOGIC_RATE_HZ          = 20.0
UI_RATE_HZ             = 60.0

EASING_KINDS = ("fractional", "curve")
CURVE_NAMES  = ("linear", "ease_out_quad", "ease_out_cubic", "ease_in_out_sine")


class ConfigError(ValueError):
    """Raised for configuration values the engine cannot work with."""


# ---------------------------------------------------------------------------
# Config structures
# ---------------------------------------------------------------------------

@dataclass
class LayoutConfig:
    menu_distance: float = DEFAULT_MENU_DISTANCE
    bubble_radius: float = DEFAULT_BUBBLE_RADIUS
    rotation_divisor: float = ROTATION_DIVISOR
    base_spacing: float = BASE_SPACING
    edge_margin: float = EDGE_MARGIN


@dataclass
class CollisionConfig:
    margin: float = COLLISION_MARGIN
    nudge: float = COINCIDENT_NUDGE


@dataclass
class ReturnConfig:
    easing: str = "fractional"
    easing_factor: float = EASING_FACTOR
    curve: str = "ease_out_cubic"
    duration_ticks: int = CURVE_DURATION_TICKS
    threshold: float = REST_THRESHOLD


@dataclass
class SchedulerConfig:
    logic_rate_hz: float = LOGIC_RATE_HZ
    ui_rate_hz: float = UI_RATE_HZ

    @property
    def logic_interval_ms(self) -> float:
        return 1000.0 / self.logic_rate_hz

    @property
    def ui_interval_ms(self) -> float:
        return 1000.0 / self.ui_rate_hz

    @property
    def ui_steps_per_logic_tick(self) -> int:
        return max(1, round(self.ui_rate_hz / self.logic_rate_hz))


@dataclass
class MenuConfig:
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    collision: CollisionConfig = field(default_factory=CollisionConfig)
    return_to_rest: ReturnConfig = field(default_factory=ReturnConfig)
    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)

    def validate(self) -> "MenuConfig":
        """Raise ConfigError on the first unusable value; return self."""
        lay, col, ret, sch = (self.layout, self.collision,
                              self.return_to_rest, self.scheduler)
        if lay.bubble_radius <= 0:
            raise ConfigError(f"bubble_radius must be positive, got {lay.bubble_radius}")
        if lay.rotation_divisor == 0:
            raise ConfigError("rotation_divisor must not be zero")
        if col.margin < 0:
            raise ConfigError(f"collision margin must be >= 0, got {col.margin}")
        if col.nudge <= 0:
            raise ConfigError(f"nudge must be positive, got {col.nudge}")
        if ret.easing not in EASING_KINDS:
            raise ConfigError(
                f"unknown easing {ret.easing!r}, expected one of {EASING_KINDS}")
        if ret.curve not in CURVE_NAMES:
            raise ConfigError(
                f"unknown easing curve {ret.curve!r}, expected one of {CURVE_NAMES}")
        if not 0 < ret.easing_factor <= 1:
            raise ConfigError(
                f"easing_factor must be in (0, 1], got {ret.easing_factor}")
        if ret.duration_ticks < 1:
            raise ConfigError(
                f"duration_ticks must be >= 1, got {ret.duration_ticks}")
        if ret.threshold <= 0:
            raise ConfigError(f"threshold must be positive, got {ret.threshold}")
        if sch.logic_rate_hz <= 0 or sch.ui_rate_hz <= 0:
            raise ConfigError("tick rates must be positive")
        if sch.ui_rate_hz < sch.logic_rate_hz:
            raise ConfigError(
                f"ui_rate_hz ({sch.ui_rate_hz}) must not be below "
                f"logic_rate_hz ({sch.logic_rate_hz})")
        return self


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------

def config_from_dict(raw: dict | None) -> MenuConfig:
    try:
        cfg = dacite.from_dict(
            data_class=MenuConfig,
            data=raw or {},
            config=dacite.Config(strict=True, cast=[int, float]),
        )
    except dacite.DaciteError as exc:
        raise ConfigError(str(exc)) from exc
    return cfg.validate()


def load_config(filepath: str) -> MenuConfig:
    with open(filepath, "r", encoding="utf-8") as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ConfigError(f"{filepath}: invalid YAML: {exc}") from exc
    if raw is not None and not isinstance(raw, dict):
        raise ConfigError(f"{filepath}: top level must be a mapping")
    return config_from_dict(raw)
