"""
Color mixing engine: converts a target RGB color into channel values for a
fixture, and reconstructs the displayed color from channel values.

Strategies:
- Basic: direct RGB (+ white/amber/UV) allocation for traditional fixtures
- Advanced: white and amber extraction for RGBWA / RGBWAU fixtures
- Intelligent: extended emitters (see intelligent_mixing)

create_optimized_color_mapping() picks the strategy and applies the intensity
policy. Every function here is pure: inputs are never modified and nothing is
cached between calls, so they are safe to call from any thread.
"""
import logging
from typing import Optional

from config import (
    Channel, ChannelMapping, ChannelRole, Color, ColorWithIntensity, FixtureColorType
)
from color_helpers import (
    ALL_COLOR_ROLES,
    AMBER_GREEN_FACTOR,
    AMBER_RED_FACTOR,
    COLD_WHITE_RATIOS,
    COLOR_CHANNEL_ROLES,
    EXTENDED_COLOR_ROLES,
    INDIGO_RATIOS,
    LIME_RATIOS,
    UV_ADVANCED_SCALE,
    UV_BASIC_SCALE,
    UV_BLUE_FACTOR,
    UV_MAX_GREEN,
    UV_MAX_RED,
    UV_MIN_BLUE,
    UV_RED_FACTOR,
    WARM_WHITE_RATIOS,
    WHITE_CHANNEL_INTENSITY_FACTOR,
    amber,
    clamp01,
    round_half_up,
    should_activate_uv,
    to_dmx,
)
from intelligent_mixing import rgb_to_channel_values_intelligent

logger = logging.getLogger(__name__)

# RED/GREEN/BLUE take the max of their own value and what is already accumulated
PRIMARY_COMPONENTS: dict[ChannelRole, int] = {
    ChannelRole.RED: 0,
    ChannelRole.GREEN: 1,
    ChannelRole.BLUE: 2,
}

# Every other color emitter adds (r, g, b) * value to the displayed color
EMITTER_CONTRIBUTIONS: dict[ChannelRole, tuple[float, float, float]] = {
    ChannelRole.WHITE: (WHITE_CHANNEL_INTENSITY_FACTOR,) * 3,
    ChannelRole.AMBER: (AMBER_RED_FACTOR, AMBER_GREEN_FACTOR, 0.0),
    ChannelRole.UV: (UV_RED_FACTOR, 0.0, UV_BLUE_FACTOR),
    ChannelRole.CYAN: (0.0, 1.0, 1.0),
    ChannelRole.MAGENTA: (1.0, 0.0, 1.0),
    ChannelRole.YELLOW: (1.0, 1.0, 0.0),
    ChannelRole.LIME: LIME_RATIOS,
    ChannelRole.INDIGO: INDIGO_RATIOS,
    ChannelRole.COLD_WHITE: tuple(c * WHITE_CHANNEL_INTENSITY_FACTOR for c in COLD_WHITE_RATIOS),
    ChannelRole.WARM_WHITE: tuple(c * WHITE_CHANNEL_INTENSITY_FACTOR for c in WARM_WHITE_RATIOS),
}


def _find_channel(channels: list[Channel], role: ChannelRole) -> Optional[Channel]:
    """Get first channel with given role."""
    for ch in channels:
        if ch.role == role:
            return ch
    return None


def get_fixture_color_type(channels: list[Channel]) -> FixtureColorType:
    """
    Classify how a fixture mixes color.

    Red, green and blue are all required for any RGB-based class; white, amber
    and UV then extend the label. Anything else is SINGLE.
    """
    roles = {ch.role for ch in channels if ch.role in COLOR_CHANNEL_ROLES}

    has_rgb = {ChannelRole.RED, ChannelRole.GREEN, ChannelRole.BLUE} <= roles
    if not has_rgb:
        return FixtureColorType.SINGLE

    has_white = ChannelRole.WHITE in roles
    has_amber = ChannelRole.AMBER in roles
    has_uv = ChannelRole.UV in roles

    if has_white and has_amber and has_uv:
        return FixtureColorType.RGBWAU
    if has_white and has_amber:
        return FixtureColorType.RGBWA
    if has_amber:
        return FixtureColorType.RGBA
    if has_white:
        return FixtureColorType.RGBW
    return FixtureColorType.RGB


def rgb_to_channel_values(
    target_color: Color,
    channels: list[Channel],
    preserve_intensity: bool = True,
) -> ChannelMapping:
    """
    Basic mapping of a color onto red/green/blue/white/amber/UV channels.

    Args:
        target_color: Color to reproduce
        channels: Fixture channels
        preserve_intensity: Scale the result by the fixture's current INTENSITY
            channel value (ignored when that channel is at 0)

    Returns:
        Channel id -> DMX value for every basic color channel
    """
    r, g, b = target_color.normalized()

    current_intensity = 1.0
    if preserve_intensity:
        intensity_channel = _find_channel(channels, ChannelRole.INTENSITY)
        if intensity_channel is not None and intensity_channel.value > 0:
            current_intensity = intensity_channel.value / 255.0

    uv = 0.0
    if should_activate_uv(r, g, b) and b > r and b > g:
        uv = clamp01((b - max(r, g)) * UV_BASIC_SCALE)

    values = {
        ChannelRole.RED: r,
        ChannelRole.GREEN: g,
        ChannelRole.BLUE: b,
        ChannelRole.WHITE: min(r, g, b),
        ChannelRole.AMBER: amber(r, g, b),
        ChannelRole.UV: uv,
    }

    return {
        ch.id: to_dmx(values[ch.role] * current_intensity)
        for ch in channels
        if ch.role in values
    }


def rgb_to_channel_values_advanced(target_color: Color, channels: list[Channel]) -> ChannelMapping:
    """
    Advanced mapping for fixtures with white and amber emitters.

    White takes the common part of red/green/blue, amber takes the remaining
    yellow, and red/green/blue only carry what is left. UV needs the original
    blue above 0.5 and little red/green left after extraction; testing only the
    extracted blue would miss colors whose blue went into the white channel.
    """
    r, g, b = target_color.normalized()

    white = min(r, g, b)
    pure_r = r - white
    pure_g = g - white
    pure_b = b - white

    yellow = min(pure_r, pure_g)
    final_r = pure_r - yellow
    final_g = pure_g - yellow
    final_b = pure_b

    uv = 0.0
    if b > UV_MIN_BLUE and final_r < UV_MAX_RED and final_g < UV_MAX_GREEN:
        uv = clamp01(final_b * UV_ADVANCED_SCALE)

    values = {
        ChannelRole.RED: final_r,
        ChannelRole.GREEN: final_g,
        ChannelRole.BLUE: final_b,
        ChannelRole.WHITE: white,
        ChannelRole.AMBER: yellow,
        ChannelRole.UV: uv,
    }

    return {
        ch.id: to_dmx(values[ch.role])
        for ch in channels
        if ch.role in values
    }


def channel_values_to_rgb(channels: list[Channel]) -> ColorWithIntensity:
    """
    Reconstruct the color a fixture shows from its channel values.

    The returned color is unscaled: an INTENSITY channel only sets the
    returned intensity and never dims r/g/b. Use apply_intensity_to_rgb()
    for the displayed color.
    """
    color_channels = [ch for ch in channels if ch.role in ALL_COLOR_ROLES]
    if not color_channels:
        return ColorWithIntensity(r=0, g=0, b=0, intensity=1.0)

    intensity = 1.0
    intensity_channel = _find_channel(channels, ChannelRole.INTENSITY)
    if intensity_channel is not None:
        intensity = intensity_channel.value / 255.0

    rgb = [0.0, 0.0, 0.0]
    for ch in color_channels:
        value = ch.value / 255.0

        if ch.role in PRIMARY_COMPONENTS:
            index = PRIMARY_COMPONENTS[ch.role]
            rgb[index] = max(rgb[index], value)
        else:
            contribution = EMITTER_CONTRIBUTIONS[ch.role]
            for i in range(3):
                rgb[i] = clamp01(rgb[i] + value * contribution[i])

    return ColorWithIntensity(
        r=to_dmx(rgb[0]),
        g=to_dmx(rgb[1]),
        b=to_dmx(rgb[2]),
        intensity=intensity,
    )


def scale_channel_mapping(mapping: ChannelMapping, intensity: float) -> ChannelMapping:
    """Scale every value of a mapping by a 0-1 intensity."""
    scale = clamp01(intensity)
    return {channel_id: round_half_up(value * scale) for channel_id, value in mapping.items()}


def apply_intensity_channel(
    mapping: ChannelMapping,
    channels: list[Channel],
    intensity: Optional[float],
) -> ChannelMapping:
    """
    Write the requested intensity straight to the fixture's INTENSITY channels,
    overriding anything a mapper put there.
    """
    if intensity is None:
        return mapping

    result = dict(mapping)
    for ch in channels:
        if ch.role == ChannelRole.INTENSITY:
            result[ch.id] = to_dmx(intensity)
    return result


def create_optimized_color_mapping(
    target_color: Color,
    channels: list[Channel],
    intensity: Optional[float] = None,
) -> ChannelMapping:
    """
    Map a color onto a fixture using the best strategy for its emitters.

    Args:
        target_color: Color to reproduce
        channels: Fixture channels
        intensity: Optional 0-1 brightness. With an INTENSITY channel it only
            sets that channel; without one it scales the color channels.

    Returns:
        Channel id -> DMX value for every channel the strategy drives
    """
    roles = {ch.role for ch in channels}
    has_intensity_channel = ChannelRole.INTENSITY in roles

    if roles.intersection(EXTENDED_COLOR_ROLES):
        # The INTENSITY channel carries brightness, so the mapper must not dim too
        mapper_intensity = None if has_intensity_channel else intensity
        logger.debug(f"Using intelligent mapping (intensity={mapper_intensity})")
        mapping = rgb_to_channel_values_intelligent(target_color, channels, mapper_intensity)
    else:
        fixture_type = get_fixture_color_type(channels)
        if fixture_type in (FixtureColorType.RGBWAU, FixtureColorType.RGBWA):
            logger.debug(f"Using advanced mapping for {fixture_type.value} fixture")
            mapping = rgb_to_channel_values_advanced(target_color, channels)
        else:
            logger.debug(f"Using basic mapping for {fixture_type.value} fixture")
            mapping = rgb_to_channel_values(target_color, channels, preserve_intensity=False)

        if intensity is not None and intensity != 1.0 and not has_intensity_channel:
            mapping = scale_channel_mapping(mapping, intensity)

    return apply_intensity_channel(mapping, channels, intensity)


def configure_logging(level: int = logging.INFO) -> None:
    """Configure logging for the color mixing modules."""
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(
        '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    ))
    for name in (__name__, "intelligent_mixing", "color_matching", "config"):
        module_logger = logging.getLogger(name)
        module_logger.addHandler(handler)
        module_logger.setLevel(level)
