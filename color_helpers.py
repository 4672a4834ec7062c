"""
Shared color constants and small pure helpers used by every mapping strategy.

All working values are normalized floats in 0-1. They are clamped before being
turned back into 0-255 DMX values. Changing any ratio or threshold here changes
the visible output of every fixture.
"""
import math
import re

from config import ChannelRole, Color, ColorWithIntensity

# Color roles handled by the basic and advanced mappers
COLOR_CHANNEL_ROLES: tuple[ChannelRole, ...] = (
    ChannelRole.RED,
    ChannelRole.GREEN,
    ChannelRole.BLUE,
    ChannelRole.WHITE,
    ChannelRole.AMBER,
    ChannelRole.UV,
)

# Roles only found on advanced fixtures; their presence selects the intelligent mapper
EXTENDED_COLOR_ROLES: tuple[ChannelRole, ...] = (
    ChannelRole.CYAN,
    ChannelRole.MAGENTA,
    ChannelRole.YELLOW,
    ChannelRole.LIME,
    ChannelRole.INDIGO,
    ChannelRole.COLD_WHITE,
    ChannelRole.WARM_WHITE,
)

ALL_COLOR_ROLES: tuple[ChannelRole, ...] = COLOR_CHANNEL_ROLES + EXTENDED_COLOR_ROLES

# White LEDs render slightly below full RGB white
WHITE_CHANNEL_INTENSITY_FACTOR = 0.95

# Amber emitter is roughly (255, 191, 0)
AMBER_RED_FACTOR = 1.0
AMBER_GREEN_FACTOR = 0.75
AMBER_BLUE_REDUCTION = 0.3

# UV emitter is roughly indigo (75, 0, 130)
UV_COLOR_HEX = "#4b0082"
UV_RED_FACTOR = 0.29
UV_BLUE_FACTOR = 0.51
UV_MIN_BLUE = 0.5
UV_MAX_RED = 0.3
UV_MAX_GREEN = 0.3
UV_BASIC_SCALE = 0.5
UV_ADVANCED_SCALE = 0.6

# Secondary color detection on pure (white-free) components
SECONDARY_MAX_OTHER = 0.1
LIME_MIN_GREEN = 0.5
LIME_MIN_RED = 0.2
LIME_MAX_RED = 0.6
INDIGO_MIN_BLUE = 0.3
INDIGO_MIN_RED = 0.1
INDIGO_MAX_RED = 0.4
BOOST_FACTOR = 0.5

# Emitter contributions (r, g, b) used when reconstructing a displayed color
LIME_RATIOS = (0.5, 1.0, 0.0)
INDIGO_RATIOS = (UV_RED_FACTOR, 0.0, UV_BLUE_FACTOR)
COLD_WHITE_RATIOS = (0.85, 0.90, 1.0)
WARM_WHITE_RATIOS = (1.0, 0.85, 0.70)

_HEX6_RE = re.compile(r'^#?([a-f\d]{2})([a-f\d]{2})([a-f\d]{2})$', re.IGNORECASE)
_HEX3_RE = re.compile(r'^#?([a-f\d])([a-f\d])([a-f\d])$', re.IGNORECASE)


def clamp01(value: float) -> float:
    """Clamp a normalized value to 0-1."""
    return max(0.0, min(1.0, value))


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (127.5 -> 128)."""
    return int(math.floor(value + 0.5))


def to_dmx(value: float) -> int:
    """Convert a normalized value to a 0-255 DMX value."""
    return round_half_up(clamp01(value) * 255)


def amber(r: float, g: float, b: float) -> float:
    """
    Amber intensity for a normalized color.

    Amber carries the yellow content (min of red and green) that blue does not
    already explain. Blue reduces it by 0.3x, and once blue reaches the yellow
    level amber switches off entirely so the white channel can take over.
    """
    yellow = min(r, g)
    if yellow > 0 and b < yellow:
        return clamp01(yellow - b * AMBER_BLUE_REDUCTION)
    return 0.0


def should_activate_uv(r: float, g: float, b: float, blue_threshold: float = UV_MIN_BLUE) -> bool:
    """UV is reserved for near-pure deep blue / purple content."""
    return b > blue_threshold and r < UV_MAX_RED and g < UV_MAX_GREEN


def apply_intensity_to_rgb(color: ColorWithIntensity) -> Color:
    """Get the displayed color for an unscaled color and its intensity."""
    return Color(
        r=round_half_up(color.r * color.intensity),
        g=round_half_up(color.g * color.intensity),
        b=round_half_up(color.b * color.intensity),
    )


def rgb_to_hex(r: float, g: float, b: float) -> str:
    """Convert 0-255 RGB values to a lowercase #rrggbb string."""
    def to_hex(n: float) -> str:
        return f"{round_half_up(max(0.0, min(255.0, n))):02x}"
    return f"#{to_hex(r)}{to_hex(g)}{to_hex(b)}"


def hex_to_rgb(text: str) -> Color:
    """
    Parse a #RRGGBB or #RGB string (the # is optional).
    Anything else parses as black.
    """
    match = _HEX6_RE.match(text.strip())
    if match:
        return Color(r=int(match.group(1), 16), g=int(match.group(2), 16), b=int(match.group(3), 16))

    # Shorthand: each digit is doubled
    match = _HEX3_RE.match(text.strip())
    if match:
        return Color(
            r=int(match.group(1) * 2, 16),
            g=int(match.group(2) * 2, 16),
            b=int(match.group(3) * 2, 16),
        )

    return Color(r=0, g=0, b=0)
