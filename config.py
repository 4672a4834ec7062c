"""
Configuration data models for fixture channels, colors and the color mixer.
Channel roles follow the fixture/scene data service naming (RED, WHITE, INTENSITY, ...).
"""
import json
import logging
import math
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)


class ChannelRole(str, Enum):
    """
    Semantic function of a single fixture channel.
    Only the color roles and INTENSITY are ever driven by the color mixer.
    """
    # Intensity
    INTENSITY = "INTENSITY"

    # Primary and basic color roles
    RED = "RED"
    GREEN = "GREEN"
    BLUE = "BLUE"
    WHITE = "WHITE"
    AMBER = "AMBER"
    UV = "UV"

    # Extended color roles
    CYAN = "CYAN"
    MAGENTA = "MAGENTA"
    YELLOW = "YELLOW"
    LIME = "LIME"
    INDIGO = "INDIGO"
    COLD_WHITE = "COLD_WHITE"
    WARM_WHITE = "WARM_WHITE"

    # Non-color roles (never written by the mixer)
    PAN = "PAN"
    TILT = "TILT"
    ZOOM = "ZOOM"
    FOCUS = "FOCUS"
    IRIS = "IRIS"
    GOBO = "GOBO"
    COLOR_WHEEL = "COLOR_WHEEL"
    EFFECT = "EFFECT"
    STROBE = "STROBE"
    MACRO = "MACRO"
    OTHER = "OTHER"


class FixtureColorType(str, Enum):
    """How a fixture mixes color, judged from its basic color roles."""
    RGB = "RGB"
    RGBW = "RGBW"
    RGBA = "RGBA"
    RGBWA = "RGBWA"
    RGBWAU = "RGBWAU"
    SINGLE = "SINGLE"


def _clamp_dmx(value: Any) -> Any:
    """Round and clamp numeric input to 0-255, leaving everything else to pydantic."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return value
    if isinstance(value, float) and math.isnan(value):
        raise ValueError("DMX value must be a number, got NaN")
    return max(0, min(255, int(math.floor(value + 0.5))))


class Color(BaseModel):
    """
    RGB color with 0-255 integer components.
    Out-of-range numbers are clamped, not rejected.
    """
    model_config = ConfigDict(frozen=True)

    r: int = Field(default=0, ge=0, le=255)
    g: int = Field(default=0, ge=0, le=255)
    b: int = Field(default=0, ge=0, le=255)

    @field_validator("r", "g", "b", mode="before")
    @classmethod
    def _clamp_component(cls, value: Any) -> Any:
        return _clamp_dmx(value)

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.r, self.g, self.b)

    def normalized(self) -> tuple[float, float, float]:
        """Get components scaled to 0-1."""
        return (self.r / 255.0, self.g / 255.0, self.b / 255.0)


class ColorWithIntensity(BaseModel):
    """
    Unscaled color (peak channel output) plus a separate brightness multiplier.
    The displayed color is color * intensity and is never stored.
    """
    model_config = ConfigDict(frozen=True)

    r: int = Field(default=0, ge=0, le=255)
    g: int = Field(default=0, ge=0, le=255)
    b: int = Field(default=0, ge=0, le=255)
    intensity: float = Field(default=1.0, ge=0.0, le=1.0)

    @field_validator("r", "g", "b", mode="before")
    @classmethod
    def _clamp_component(cls, value: Any) -> Any:
        return _clamp_dmx(value)

    @field_validator("intensity", mode="before")
    @classmethod
    def _clamp_intensity(cls, value: Any) -> Any:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return value
        if math.isnan(value):
            raise ValueError("intensity must be a number, got NaN")
        return max(0.0, min(1.0, float(value)))

    @property
    def color(self) -> Color:
        return Color(r=self.r, g=self.g, b=self.b)


class Channel(BaseModel):
    """
    One channel of a fixture instance as seen by the color mixer.
    The id is opaque and only echoed back in channel mappings.
    """
    model_config = ConfigDict(frozen=True)

    id: Union[str, int] = Field(..., description="Opaque channel identifier")
    role: ChannelRole = Field(..., description="What this channel controls")
    value: int = Field(default=0, ge=0, le=255, description="Current DMX value")

    @field_validator("value", mode="before")
    @classmethod
    def _clamp_value(cls, value: Any) -> Any:
        return _clamp_dmx(value)


# Output of every forward mapper: channel id -> DMX value
ChannelMapping = dict[Union[str, int], int]


class ChannelDefinition(BaseModel):
    """
    Definition of a single channel inside a fixture profile.
    """
    offset: int = Field(..., ge=1, description="Channel offset from start (1 = first channel)")
    name: str = Field(default="", description="Channel name (e.g., 'Red Dimmer')")
    role: ChannelRole = Field(..., description="What this channel controls")
    default_value: int = Field(default=0, ge=0, le=255, description="Default/home value")


class FixtureProfile(BaseModel):
    """
    Profile defining a fixture type's channel layout.
    """
    name: str = Field(..., description="Profile name")
    manufacturer: str = Field(default="", description="Manufacturer name")
    model: str = Field(default="", description="Model name")
    channels: list[ChannelDefinition] = Field(..., description="Channel definitions")

    @property
    def channel_count(self) -> int:
        return len(self.channels)

    @property
    def roles(self) -> set[ChannelRole]:
        return {ch.role for ch in self.channels}

    def get_channel_by_role(self, role: ChannelRole) -> Optional[ChannelDefinition]:
        """Get first channel with given role."""
        for ch in self.channels:
            if ch.role == role:
                return ch
        return None

    def build_channels(self, values: Optional[dict[int, int]] = None) -> list[Channel]:
        """
        Build mixer channels for one instance of this profile.

        Channel ids are the offsets as strings. Current values come from
        `values` (keyed by offset) and fall back to each channel's default.
        """
        values = values or {}
        return [
            Channel(
                id=str(ch.offset),
                role=ch.role,
                value=values.get(ch.offset, ch.default_value),
            )
            for ch in self.channels
        ]


class GelFilter(BaseModel):
    """A theatrical gel filter with an approximate RGB appearance."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Filter name and number (e.g., 'R25 Red')")
    rgb_hex: str = Field(..., description="Approximate color as #RRGGBB")
    applications: str = Field(default="")
    keywords: str = Field(default="")


class MixerConfig(BaseModel):
    """Color mixer configuration: fixture profiles, gel catalog and defaults."""
    name: str = Field(default="My Rig")
    default_intensity: float = Field(default=1.0, ge=0.0, le=1.0)
    similarity_threshold: float = Field(default=95.0, ge=0.0, le=100.0)
    profiles: list[FixtureProfile] = Field(default_factory=list)
    filters: list[GelFilter] = Field(default_factory=list)

    def get_profile(self, name: str) -> Optional[FixtureProfile]:
        """Get a profile by name."""
        for profile in self.profiles:
            if profile.name == name:
                return profile
        return FIXTURE_PRESETS.get(name)

    def get_filters(self) -> list[GelFilter]:
        """Get the configured gel catalog, or the built-in one if none is configured."""
        if self.filters:
            return list(self.filters)
        return list(FILTER_PRESETS)

    def save(self, path: str) -> None:
        """Save configuration to JSON file."""
        with open(path, 'w') as f:
            json.dump(self.model_dump(mode="json"), f, indent=2)
        logger.info(f"Saved mixer config '{self.name}' to {path}")

    @classmethod
    def load(cls, path: str) -> "MixerConfig":
        """Load configuration from JSON file."""
        with open(path, 'r') as f:
            data = json.load(f)
        config = cls.model_validate(data)
        logger.info(f"Loaded mixer config '{config.name}': "
                    f"{len(config.profiles)} profiles, {len(config.filters)} filters")
        return config


# =============================================================================
# FIXTURE PRESETS
# =============================================================================

def _channels(*roles: ChannelRole) -> list[ChannelDefinition]:
    """Build sequential channel definitions for the given roles."""
    return [
        ChannelDefinition(
            offset=i + 1,
            name=get_role_display_name(role),
            role=role,
            default_value=255 if role == ChannelRole.INTENSITY else 0,
        )
        for i, role in enumerate(roles)
    ]


def _create_generic_rgb_par() -> FixtureProfile:
    """Create a generic RGB PAR profile."""
    return FixtureProfile(
        name="Generic RGB PAR",
        manufacturer="Generic",
        model="RGB PAR",
        channels=_channels(ChannelRole.RED, ChannelRole.GREEN, ChannelRole.BLUE),
    )


def _create_generic_rgbw_par() -> FixtureProfile:
    """Create a generic RGBW PAR profile."""
    return FixtureProfile(
        name="Generic RGBW PAR",
        manufacturer="Generic",
        model="RGBW PAR",
        channels=_channels(ChannelRole.RED, ChannelRole.GREEN, ChannelRole.BLUE, ChannelRole.WHITE),
    )


def _create_generic_dimmer_rgbw() -> FixtureProfile:
    """Create a generic dimmer + RGBW profile."""
    return FixtureProfile(
        name="Generic Dimmer+RGBW",
        manufacturer="Generic",
        model="Dimmer+RGBW PAR",
        channels=_channels(
            ChannelRole.INTENSITY, ChannelRole.RED, ChannelRole.GREEN,
            ChannelRole.BLUE, ChannelRole.WHITE,
        ),
    )


def _create_generic_rgbwau_par() -> FixtureProfile:
    """Create a 6-in-1 RGBWA+UV PAR profile with master dimmer and strobe."""
    return FixtureProfile(
        name="Generic RGBWAU PAR",
        manufacturer="Generic",
        model="6-in-1 PAR",
        channels=_channels(
            ChannelRole.INTENSITY, ChannelRole.RED, ChannelRole.GREEN, ChannelRole.BLUE,
            ChannelRole.WHITE, ChannelRole.AMBER, ChannelRole.UV, ChannelRole.STROBE,
        ),
    )


def _create_generic_rgbal_par() -> FixtureProfile:
    """Create an RGBA + Lime PAR profile (extended color engine)."""
    return FixtureProfile(
        name="Generic RGBAL PAR",
        manufacturer="Generic",
        model="RGBA+Lime PAR",
        channels=_channels(
            ChannelRole.INTENSITY, ChannelRole.RED, ChannelRole.GREEN, ChannelRole.BLUE,
            ChannelRole.AMBER, ChannelRole.LIME,
        ),
    )


def _create_generic_rgbcmy_wash() -> FixtureProfile:
    """Create an RGB+CMY wash profile with warm/cold white emitters and pan/tilt."""
    return FixtureProfile(
        name="Generic RGBCMY Wash",
        manufacturer="Generic",
        model="RGBCMY Wash",
        channels=_channels(
            ChannelRole.PAN, ChannelRole.TILT, ChannelRole.INTENSITY,
            ChannelRole.RED, ChannelRole.GREEN, ChannelRole.BLUE,
            ChannelRole.CYAN, ChannelRole.MAGENTA, ChannelRole.YELLOW,
            ChannelRole.WARM_WHITE, ChannelRole.COLD_WHITE, ChannelRole.ZOOM,
        ),
    )


def _create_generic_indigo_bar() -> FixtureProfile:
    """Create an LED bar profile without a blue emitter (indigo and cyan instead)."""
    return FixtureProfile(
        name="Generic Indigo LED Bar",
        manufacturer="Generic",
        model="RG+Indigo+Cyan Bar",
        channels=_channels(
            ChannelRole.RED, ChannelRole.GREEN, ChannelRole.INDIGO, ChannelRole.CYAN,
        ),
    )


FIXTURE_PRESETS: dict[str, FixtureProfile] = {}


def _register_presets() -> None:
    for factory in (
        _create_generic_rgb_par,
        _create_generic_rgbw_par,
        _create_generic_dimmer_rgbw,
        _create_generic_rgbwau_par,
        _create_generic_rgbal_par,
        _create_generic_rgbcmy_wash,
        _create_generic_indigo_bar,
    ):
        profile = factory()
        FIXTURE_PRESETS[profile.name] = profile


# A few well-known Roscolux filters; a full catalog is loaded through MixerConfig
FILTER_PRESETS: tuple[GelFilter, ...] = (
    GelFilter(name="R00 Clear", rgb_hex="#FFFFFF",
              applications="No color correction, maximum light transmission",
              keywords="clear, colorless, neutral, transmission"),
    GelFilter(name="R02 Bastard Amber", rgb_hex="#FFF2D6",
              applications="Warm skin tones, sunlight", keywords="amber, warm, skin"),
    GelFilter(name="R07 Pale Yellow", rgb_hex="#FFFACD",
              applications="Sunlight, candle light", keywords="yellow, pale, warm"),
    GelFilter(name="R17 Light Flame", rgb_hex="#FFD700",
              applications="Fire effects, sunset", keywords="flame, gold, warm"),
    GelFilter(name="R22 Deep Amber", rgb_hex="#FFA500",
              applications="Sunset, firelight", keywords="amber, orange, deep"),
    GelFilter(name="R23 Orange", rgb_hex="#FF8C00",
              applications="Fire, dramatic warm accents", keywords="orange, fire"),
    GelFilter(name="R25 Red", rgb_hex="#FF0000",
              applications="Saturated red washes", keywords="red, saturated, primary"),
    GelFilter(name="R27 Medium Red", rgb_hex="#DC143C",
              applications="Theatrical drama, danger", keywords="red, medium, drama"),
    GelFilter(name="R32 Medium Pink", rgb_hex="#FF69B4",
              applications="Cabaret, romance", keywords="pink, medium"),
    GelFilter(name="R59 Indigo", rgb_hex="#4B0082",
              applications="Night scenes, black light effects", keywords="indigo, uv, purple"),
    GelFilter(name="R80 Primary Blue", rgb_hex="#0000FF",
              applications="Saturated blue washes", keywords="blue, primary, saturated"),
    GelFilter(name="R89 Moss Green", rgb_hex="#00FF00",
              applications="Foliage, eerie effects", keywords="green, primary"),
)


def get_available_presets() -> list[str]:
    """Get list of available fixture preset names."""
    return list(FIXTURE_PRESETS.keys())


def get_preset(name: str) -> Optional[FixtureProfile]:
    """Get a fixture preset by name."""
    return FIXTURE_PRESETS.get(name)


def get_role_display_name(role: ChannelRole) -> str:
    """Get human-readable name for a channel role."""
    names = {
        ChannelRole.INTENSITY: "Intensity",
        ChannelRole.RED: "Red",
        ChannelRole.GREEN: "Green",
        ChannelRole.BLUE: "Blue",
        ChannelRole.WHITE: "White",
        ChannelRole.AMBER: "Amber",
        ChannelRole.UV: "UV",
        ChannelRole.CYAN: "Cyan",
        ChannelRole.MAGENTA: "Magenta",
        ChannelRole.YELLOW: "Yellow",
        ChannelRole.LIME: "Lime",
        ChannelRole.INDIGO: "Indigo",
        ChannelRole.COLD_WHITE: "Cold White",
        ChannelRole.WARM_WHITE: "Warm White",
        ChannelRole.PAN: "Pan",
        ChannelRole.TILT: "Tilt",
        ChannelRole.ZOOM: "Zoom",
        ChannelRole.FOCUS: "Focus",
        ChannelRole.IRIS: "Iris",
        ChannelRole.GOBO: "Gobo",
        ChannelRole.COLOR_WHEEL: "Color Wheel",
        ChannelRole.EFFECT: "Effect",
        ChannelRole.STROBE: "Strobe",
        ChannelRole.MACRO: "Macro",
        ChannelRole.OTHER: "Other",
    }
    return names.get(role, role.value)


_register_presets()
