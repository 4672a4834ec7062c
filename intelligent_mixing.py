"""
Brightness-maximizing color mapping for fixtures with extended emitters
(cyan, magenta, yellow, lime, indigo, warm and cold white).

Allocation happens in a fixed order. Each stage consumes the part of the pure
(white-free) red/green/blue it explains, so later stages never count the same
light twice.
"""
import logging
from typing import Optional

from config import Channel, ChannelMapping, ChannelRole, Color
from color_helpers import (
    ALL_COLOR_ROLES,
    AMBER_GREEN_FACTOR,
    AMBER_RED_FACTOR,
    BOOST_FACTOR,
    INDIGO_MAX_RED,
    INDIGO_MIN_BLUE,
    INDIGO_MIN_RED,
    LIME_MAX_RED,
    LIME_MIN_GREEN,
    LIME_MIN_RED,
    SECONDARY_MAX_OTHER,
    UV_BASIC_SCALE,
    UV_BLUE_FACTOR,
    UV_RED_FACTOR,
    WHITE_CHANNEL_INTENSITY_FACTOR,
    amber,
    clamp01,
    should_activate_uv,
    to_dmx,
)

logger = logging.getLogger(__name__)


def is_cyan(pure_r: float, pure_g: float, pure_b: float) -> bool:
    return pure_g > 0 and pure_b > 0 and pure_r < SECONDARY_MAX_OTHER


def is_magenta(pure_r: float, pure_g: float, pure_b: float) -> bool:
    return pure_r > 0 and pure_b > 0 and pure_g < SECONDARY_MAX_OTHER


def is_yellow(pure_r: float, pure_g: float, pure_b: float) -> bool:
    return pure_r > 0 and pure_g > 0 and pure_b < SECONDARY_MAX_OTHER


def is_lime(pure_r: float, pure_g: float, pure_b: float) -> bool:
    """Strong green with a moderate touch of red."""
    return (pure_g > LIME_MIN_GREEN
            and LIME_MIN_RED < pure_r < LIME_MAX_RED
            and pure_b < SECONDARY_MAX_OTHER)


def is_indigo(pure_r: float, pure_g: float, pure_b: float) -> bool:
    """Blue with a moderate touch of red."""
    return (pure_b > INDIGO_MIN_BLUE
            and INDIGO_MIN_RED < pure_r < INDIGO_MAX_RED
            and pure_g < SECONDARY_MAX_OTHER)


def select_white_role(r: float, g: float, b: float, roles: set[ChannelRole]) -> Optional[ChannelRole]:
    """
    Pick the emitter that carries the white component of a color.

    Warm white takes red-tinted colors and cold white takes blue-tinted ones.
    Generic white is only used when the fixture has neither extended white.
    Returns None when no emitter fits.
    """
    if ChannelRole.WARM_WHITE in roles and r > g and r > b:
        return ChannelRole.WARM_WHITE
    if ChannelRole.COLD_WHITE in roles and b > r and b > g:
        return ChannelRole.COLD_WHITE
    if (ChannelRole.WHITE in roles
            and ChannelRole.WARM_WHITE not in roles
            and ChannelRole.COLD_WHITE not in roles):
        return ChannelRole.WHITE
    return None


def rgb_to_channel_values_intelligent(
    target_color: Color,
    channels: list[Channel],
    intensity: Optional[float] = None,
) -> ChannelMapping:
    """
    Map a color onto every color emitter a fixture has.

    Args:
        target_color: Color to reproduce
        channels: Fixture channels; only their roles are read
        intensity: Optional 0-1 brightness; values are scaled when it is below 1

    Returns:
        Channel id -> DMX value for every color-role channel. Emitters that
        play no part in the color are driven to 0.
    """
    if not channels:
        return {}

    roles = {ch.role for ch in channels}
    r, g, b = target_color.normalized()
    values: dict[ChannelRole, float] = {}

    # White is only extracted when some white emitter will carry it,
    # otherwise it stays in the pure components for the primaries
    white_role = select_white_role(r, g, b, roles)
    white = min(r, g, b) if white_role is not None else 0.0
    pure_r = r - white
    pure_g = g - white
    pure_b = b - white

    # Secondary detection runs once, before anything is consumed
    cyan = is_cyan(pure_r, pure_g, pure_b)
    magenta = is_magenta(pure_r, pure_g, pure_b)
    yellow = is_yellow(pure_r, pure_g, pure_b)
    lime = is_lime(pure_r, pure_g, pure_b)
    indigo = is_indigo(pure_r, pure_g, pure_b)

    if ChannelRole.CYAN in roles and cyan:
        amount = min(pure_g, pure_b)
        values[ChannelRole.CYAN] = amount
        pure_g -= amount
        pure_b -= amount

    if ChannelRole.MAGENTA in roles and magenta:
        amount = min(pure_r, pure_b)
        values[ChannelRole.MAGENTA] = amount
        pure_r -= amount
        pure_b -= amount

    if ChannelRole.YELLOW in roles and yellow:
        amount = min(pure_r, pure_g)
        values[ChannelRole.YELLOW] = amount
        pure_r -= amount
        pure_g -= amount

    # Lime and indigo boost rather than replace, nothing is consumed
    if ChannelRole.LIME in roles and lime:
        values[ChannelRole.LIME] = pure_g * BOOST_FACTOR

    if ChannelRole.INDIGO in roles and indigo:
        values[ChannelRole.INDIGO] = pure_b * BOOST_FACTOR

    if white_role is not None:
        values[white_role] = white * WHITE_CHANNEL_INTENSITY_FACTOR

    if ChannelRole.AMBER in roles:
        amber_value = amber(pure_r, pure_g, pure_b)
        values[ChannelRole.AMBER] = amber_value
        pure_r = max(0.0, pure_r - amber_value * AMBER_RED_FACTOR)
        pure_g = max(0.0, pure_g - amber_value * AMBER_GREEN_FACTOR)

    if ChannelRole.UV in roles and should_activate_uv(pure_r, pure_g, pure_b):
        uv_value = clamp01((pure_b - max(pure_r, pure_g)) * UV_BASIC_SCALE)
        values[ChannelRole.UV] = uv_value
        pure_r = max(0.0, pure_r - uv_value * UV_RED_FACTOR)
        pure_b = max(0.0, pure_b - uv_value * UV_BLUE_FACTOR)

    # No blue emitter: synthesize blue from indigo, or from cyan
    if ChannelRole.BLUE not in roles and pure_b > 0:
        if ChannelRole.INDIGO in roles:
            indigo_value = min(1.0, pure_b / UV_BLUE_FACTOR)
            values[ChannelRole.INDIGO] = max(values.get(ChannelRole.INDIGO, 0.0), indigo_value)
            pure_b = max(0.0, pure_b - indigo_value * UV_BLUE_FACTOR)
            pure_r = max(0.0, pure_r - indigo_value * UV_RED_FACTOR)
        elif ChannelRole.CYAN in roles:
            cyan_value = min(1.0, pure_b)
            values[ChannelRole.CYAN] = max(values.get(ChannelRole.CYAN, 0.0), cyan_value)
            pure_b = max(0.0, pure_b - cyan_value)
            pure_g = max(0.0, pure_g - cyan_value)

    if ChannelRole.RED in roles:
        values[ChannelRole.RED] = pure_r
    if ChannelRole.GREEN in roles:
        values[ChannelRole.GREEN] = pure_g
    if ChannelRole.BLUE in roles:
        values[ChannelRole.BLUE] = pure_b

    if intensity is not None and intensity < 1:
        scale = clamp01(intensity)
        values = {role: value * scale for role, value in values.items()}

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            f"Intelligent mapping for ({target_color.r}, {target_color.g}, {target_color.b}): "
            + ", ".join(f"{role.value}={value:.3f}" for role, value in values.items())
        )

    return {
        ch.id: to_dmx(values.get(ch.role, 0.0))
        for ch in channels
        if ch.role in ALL_COLOR_ROLES
    }
