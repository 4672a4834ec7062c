"""Tests for classification, basic/advanced mapping, reverse mapping and strategy selection."""

import itertools

import pytest

from config import (
    Channel, ChannelRole, Color, ColorWithIntensity, FixtureColorType, get_preset
)
from color_helpers import ALL_COLOR_ROLES
from color_mixing import (
    EMITTER_CONTRIBUTIONS,
    PRIMARY_COMPONENTS,
    apply_intensity_channel,
    channel_values_to_rgb,
    create_optimized_color_mapping,
    get_fixture_color_type,
    rgb_to_channel_values,
    rgb_to_channel_values_advanced,
    scale_channel_mapping,
)

R, G, B = ChannelRole.RED, ChannelRole.GREEN, ChannelRole.BLUE
W, A, U = ChannelRole.WHITE, ChannelRole.AMBER, ChannelRole.UV
DIM = ChannelRole.INTENSITY

RGBWAU = (R, G, B, W, A, U)


class TestGetFixtureColorType:
    """Channel classifier."""

    @pytest.mark.parametrize(
        ("roles", "expected"),
        [
            ((R, G, B), FixtureColorType.RGB),
            ((R, G, B, W), FixtureColorType.RGBW),
            ((R, G, B, A), FixtureColorType.RGBA),
            ((R, G, B, W, A), FixtureColorType.RGBWA),
            ((R, G, B, W, A, U), FixtureColorType.RGBWAU),
            ((R, G, B, U), FixtureColorType.RGB),
            ((R, G, B, A, U), FixtureColorType.RGBA),
            ((R, G), FixtureColorType.SINGLE),
            ((W,), FixtureColorType.SINGLE),
            ((), FixtureColorType.SINGLE),
        ],
    )
    def test_labels(self, make_channels, roles, expected) -> None:
        assert get_fixture_color_type(make_channels(*roles)) == expected

    def test_ignores_non_color_roles(self, make_channels) -> None:
        channels = make_channels(ChannelRole.PAN, DIM, R, G, B, ChannelRole.GOBO)
        assert get_fixture_color_type(channels) == FixtureColorType.RGB

    def test_extended_roles_without_primaries_are_single(self, make_channels) -> None:
        channels = make_channels(ChannelRole.CYAN, ChannelRole.MAGENTA, ChannelRole.YELLOW)
        assert get_fixture_color_type(channels) == FixtureColorType.SINGLE

    @pytest.mark.parametrize(
        "extras",
        [combo for n in range(4) for combo in itertools.combinations((W, A, U), n)],
    )
    def test_adding_basic_roles_never_single(self, make_channels, extras) -> None:
        assert get_fixture_color_type(make_channels(R, G, B, *extras)) != FixtureColorType.SINGLE

    @pytest.mark.parametrize("missing", [R, G, B])
    def test_removing_a_primary_is_single(self, make_channels, missing) -> None:
        roles = [role for role in RGBWAU if role != missing]
        assert get_fixture_color_type(make_channels(*roles)) == FixtureColorType.SINGLE

    def test_preset_profile(self) -> None:
        channels = get_preset("Generic RGBWAU PAR").build_channels()
        assert get_fixture_color_type(channels) == FixtureColorType.RGBWAU


class TestRgbToChannelValues:
    """Basic mapper."""

    def test_pure_red(self, make_channels) -> None:
        result = rgb_to_channel_values(Color(r=255, g=0, b=0), make_channels(*RGBWAU))
        assert result == {"1": 255, "2": 0, "3": 0, "4": 0, "5": 0, "6": 0}

    def test_white_channel_gets_minimum(self, make_channels) -> None:
        result = rgb_to_channel_values(Color(r=255, g=255, b=255), make_channels(*RGBWAU))
        assert result["4"] == 255

    def test_amber_for_yellow(self, make_channels) -> None:
        result = rgb_to_channel_values(Color(r=255, g=255, b=0), make_channels(*RGBWAU))
        assert result["5"] > 0
        assert result["3"] == 0

    def test_uv_for_deep_blue(self, make_channels) -> None:
        result = rgb_to_channel_values(Color(r=0, g=0, b=255), make_channels(*RGBWAU))
        assert result["6"] == 128

    def test_uv_needs_bright_blue(self, make_channels) -> None:
        result = rgb_to_channel_values(Color(r=0, g=0, b=100), make_channels(*RGBWAU))
        assert result["6"] == 0

    def test_uv_suppressed_for_red(self, make_channels) -> None:
        result = rgb_to_channel_values(Color(r=255, g=0, b=0), make_channels(*RGBWAU))
        assert result["6"] == 0

    def test_mixed_color(self, make_channels) -> None:
        result = rgb_to_channel_values(Color(r=128, g=64, b=32), make_channels(R, G, B))
        assert result == {"1": 128, "2": 64, "3": 32}

    def test_preserve_intensity_scales_by_current_intensity(self, make_channels) -> None:
        channels = make_channels(DIM, R, G, B, values=[128, 0, 0, 0])
        result = rgb_to_channel_values(Color(r=255, g=0, b=0), channels)
        assert result["2"] == 128

    def test_preserve_intensity_ignores_zero_intensity(self, make_channels) -> None:
        channels = make_channels(DIM, R, G, B, values=[0, 0, 0, 0])
        result = rgb_to_channel_values(Color(r=255, g=0, b=0), channels)
        assert result["2"] == 255

    def test_preserve_intensity_disabled(self, make_channels) -> None:
        channels = make_channels(DIM, R, G, B, values=[128, 0, 0, 0])
        result = rgb_to_channel_values(Color(r=255, g=0, b=0), channels, preserve_intensity=False)
        assert result["2"] == 255

    def test_only_basic_color_roles_are_driven(self, make_channels) -> None:
        channels = make_channels(ChannelRole.PAN, DIM, R, G, B)
        result = rgb_to_channel_values(Color(r=10, g=20, b=30), channels)
        assert set(result) == {"3", "4", "5"}

    def test_empty_channels(self) -> None:
        assert rgb_to_channel_values(Color(r=255, g=0, b=0), []) == {}


class TestRgbToChannelValuesAdvanced:
    """Advanced (white/amber extraction) mapper."""

    def test_white_fully_extracted(self, make_channels) -> None:
        result = rgb_to_channel_values_advanced(Color(r=255, g=255, b=255), make_channels(R, G, B, W))
        assert result == {"1": 0, "2": 0, "3": 0, "4": 255}

    def test_yellow_goes_to_amber(self, make_channels) -> None:
        result = rgb_to_channel_values_advanced(Color(r=255, g=255, b=0), make_channels(R, G, B, W, A))
        assert result["5"] == 255
        assert result["1"] == 0
        assert result["2"] == 0
        assert result["3"] == 0

    def test_orange_splits_red_and_amber(self, make_channels) -> None:
        result = rgb_to_channel_values_advanced(Color(r=255, g=128, b=0), make_channels(R, G, B, W, A))
        assert result == {"1": 127, "2": 0, "3": 0, "4": 0, "5": 128}

    def test_uv_for_deep_blue(self, make_channels) -> None:
        result = rgb_to_channel_values_advanced(Color(r=0, g=0, b=255), make_channels(*RGBWAU))
        assert result["3"] == 255
        assert result["6"] == 153

    def test_uv_uses_original_blue_level(self, make_channels) -> None:
        # Blue above 0.5 before white extraction, little red/green after it
        result = rgb_to_channel_values_advanced(Color(r=100, g=100, b=255), make_channels(*RGBWAU))
        assert result["4"] == 100
        assert result["6"] > 0

    def test_uv_off_for_dim_blue(self, make_channels) -> None:
        result = rgb_to_channel_values_advanced(Color(r=0, g=0, b=100), make_channels(*RGBWAU))
        assert result["6"] == 0

    def test_uv_suppressed_for_red(self, make_channels) -> None:
        result = rgb_to_channel_values_advanced(Color(r=255, g=0, b=0), make_channels(*RGBWAU))
        assert result["1"] == 255
        assert result["6"] == 0

    def test_empty_channels(self) -> None:
        assert rgb_to_channel_values_advanced(Color(r=255, g=0, b=0), []) == {}


class TestChannelValuesToRgb:
    """Reverse mapper."""

    def test_empty_is_black(self) -> None:
        assert channel_values_to_rgb([]) == ColorWithIntensity(r=0, g=0, b=0, intensity=1.0)

    def test_no_color_channels_is_black(self, make_channels) -> None:
        channels = make_channels(DIM, ChannelRole.PAN, values=[128, 50])
        assert channel_values_to_rgb(channels) == ColorWithIntensity(r=0, g=0, b=0, intensity=1.0)

    def test_rgb_without_intensity(self, make_channels) -> None:
        result = channel_values_to_rgb(make_channels(R, G, B, values=[255, 0, 0]))
        assert result == ColorWithIntensity(r=255, g=0, b=0, intensity=1.0)

    def test_intensity_channel_is_not_applied(self, make_channels) -> None:
        result = channel_values_to_rgb(make_channels(DIM, R, G, B, values=[128, 255, 0, 0]))
        assert (result.r, result.g, result.b) == (255, 0, 0)
        assert result.intensity == pytest.approx(0.5, abs=0.01)

    def test_zero_intensity_keeps_color(self, make_channels) -> None:
        result = channel_values_to_rgb(make_channels(DIM, R, G, B, values=[0, 255, 128, 64]))
        assert (result.r, result.g, result.b) == (255, 128, 64)
        assert result.intensity == 0

    def test_white(self, make_channels) -> None:
        result = channel_values_to_rgb(make_channels(R, G, B, W, values=[0, 0, 0, 255]))
        assert (result.r, result.g, result.b) == (242, 242, 242)

    def test_amber(self, make_channels) -> None:
        result = channel_values_to_rgb(make_channels(A, values=[255]))
        assert (result.r, result.g, result.b) == (255, 191, 0)

    def test_uv(self, make_channels) -> None:
        result = channel_values_to_rgb(make_channels(U, values=[255]))
        assert (result.r, result.g, result.b) == (74, 0, 130)

    def test_extended_emitters(self, make_channels) -> None:
        cases = {
            ChannelRole.CYAN: (0, 255, 255),
            ChannelRole.MAGENTA: (255, 0, 255),
            ChannelRole.YELLOW: (255, 255, 0),
            ChannelRole.LIME: (128, 255, 0),
            ChannelRole.INDIGO: (74, 0, 130),
            ChannelRole.COLD_WHITE: (206, 218, 242),
            ChannelRole.WARM_WHITE: (242, 206, 170),
        }
        for role, expected in cases.items():
            result = channel_values_to_rgb(make_channels(role, values=[255]))
            assert (result.r, result.g, result.b) == expected, role

    def test_primaries_take_max_not_sum(self, make_channels) -> None:
        result = channel_values_to_rgb(make_channels(R, R, values=[128, 200]))
        assert result.r == 200

    def test_accumulation_is_clamped(self, make_channels) -> None:
        result = channel_values_to_rgb(make_channels(R, W, A, values=[255, 255, 255]))
        assert result.r == 255

    def test_every_color_role_is_handled(self) -> None:
        primaries = set(PRIMARY_COMPONENTS)
        emitters = set(EMITTER_CONTRIBUTIONS)
        assert primaries.isdisjoint(emitters)
        assert primaries | emitters == set(ALL_COLOR_ROLES)

    @pytest.mark.parametrize(
        "rgb",
        [(0, 0, 0), (255, 0, 0), (0, 255, 0), (0, 0, 255), (255, 255, 255), (128, 64, 32)],
    )
    def test_basic_round_trip(self, make_channels, apply_mapping, rgb) -> None:
        channels = make_channels(R, G, B)
        color = Color(r=rgb[0], g=rgb[1], b=rgb[2])
        mapping = create_optimized_color_mapping(color, channels)
        result = channel_values_to_rgb(apply_mapping(channels, mapping))
        assert (result.r, result.g, result.b) == rgb
        assert result.intensity == 1.0


class TestIntensityAdjustments:
    """Post-mapping intensity steps."""

    def test_scale_channel_mapping(self) -> None:
        assert scale_channel_mapping({"1": 255, "2": 100, "3": 0}, 0.5) == {"1": 128, "2": 50, "3": 0}

    def test_scale_channel_mapping_clamps_intensity(self) -> None:
        assert scale_channel_mapping({"1": 200}, 1.5) == {"1": 200}
        assert scale_channel_mapping({"1": 200}, -1.0) == {"1": 0}

    def test_apply_intensity_channel(self, make_channels) -> None:
        channels = make_channels(DIM, R, values=[10, 0])
        mapping = {"1": 99, "2": 255}
        result = apply_intensity_channel(mapping, channels, 0.25)
        assert result == {"1": 64, "2": 255}
        # Input mapping is left alone
        assert mapping == {"1": 99, "2": 255}

    def test_apply_intensity_channel_without_intensity(self, make_channels) -> None:
        channels = make_channels(DIM, R)
        assert apply_intensity_channel({"2": 255}, channels, None) == {"2": 255}


class TestCreateOptimizedColorMapping:
    """Strategy selection and intensity policy."""

    def test_basic_for_simple_fixture(self, make_channels) -> None:
        result = create_optimized_color_mapping(Color(r=255, g=128, b=64), make_channels(R, G, B))
        assert result == {"1": 255, "2": 128, "3": 64}

    def test_rgbw_uses_basic_mapping(self, make_channels) -> None:
        result = create_optimized_color_mapping(Color(r=255, g=255, b=255), make_channels(R, G, B, W))
        assert result == {"1": 255, "2": 255, "3": 255, "4": 255}

    def test_advanced_for_rgbwau(self, make_channels) -> None:
        result = create_optimized_color_mapping(Color(r=255, g=255, b=255), make_channels(*RGBWAU))
        assert result["4"] == 255
        assert (result["1"], result["2"], result["3"]) == (0, 0, 0)

    def test_advanced_for_rgbwa(self, make_channels) -> None:
        result = create_optimized_color_mapping(Color(r=255, g=255, b=0), make_channels(R, G, B, W, A))
        assert result["5"] == 255
        assert result["3"] == 0

    def test_intelligent_for_extended_roles(self, make_channels) -> None:
        channels = make_channels(R, G, B, ChannelRole.CYAN)
        result = create_optimized_color_mapping(Color(r=0, g=255, b=255), channels)
        assert result["4"] == 255

    def test_intensity_channel_prevents_double_scaling(self, make_channels) -> None:
        channels = make_channels(DIM, R, G, B, values=[255, 0, 0, 0])
        result = create_optimized_color_mapping(Color(r=255, g=128, b=0), channels, intensity=0.5)
        assert result == {"1": 128, "2": 255, "3": 128, "4": 0}

    def test_scales_without_intensity_channel(self, make_channels) -> None:
        result = create_optimized_color_mapping(
            Color(r=255, g=128, b=0), make_channels(R, G, B), intensity=0.5
        )
        assert result == {"1": 128, "2": 64, "3": 0}

    def test_full_intensity_is_unscaled(self, make_channels) -> None:
        result = create_optimized_color_mapping(Color(r=255, g=0, b=0), make_channels(R, G, B), intensity=1.0)
        assert result["1"] == 255

    def test_zero_intensity_is_dark(self, make_channels) -> None:
        result = create_optimized_color_mapping(Color(r=255, g=255, b=255), make_channels(R, G, B), intensity=0.0)
        assert set(result.values()) == {0}

    def test_intensity_channel_untouched_without_intensity(self, make_channels) -> None:
        channels = make_channels(DIM, R, G, B, values=[200, 0, 0, 0])
        result = create_optimized_color_mapping(Color(r=255, g=0, b=0), channels)
        assert "1" not in result

    def test_intelligent_path_sets_intensity_channel(self, make_channels) -> None:
        channels = make_channels(DIM, R, G, B, ChannelRole.CYAN)
        result = create_optimized_color_mapping(Color(r=255, g=0, b=0), channels, intensity=0.25)
        assert result["1"] == 64
        assert result["2"] == 255

    def test_intelligent_path_scales_without_intensity_channel(self, make_channels) -> None:
        channels = make_channels(R, G, B, ChannelRole.CYAN)
        result = create_optimized_color_mapping(Color(r=255, g=0, b=0), channels, intensity=0.5)
        assert result["1"] == 128

    def test_non_color_channels_are_not_driven(self, make_channels) -> None:
        channels = make_channels(ChannelRole.PAN, ChannelRole.TILT, R, G, B, ChannelRole.GOBO)
        result = create_optimized_color_mapping(Color(r=1, g=2, b=3), channels, intensity=0.5)
        assert set(result) == {"3", "4", "5"}

    def test_empty_channels(self) -> None:
        assert create_optimized_color_mapping(Color(r=255, g=0, b=0), []) == {}
        assert create_optimized_color_mapping(Color(r=255, g=0, b=0), [], intensity=0.5) == {}

    @pytest.mark.parametrize(
        "preset",
        [
            "Generic RGB PAR",
            "Generic RGBW PAR",
            "Generic Dimmer+RGBW",
            "Generic RGBWAU PAR",
            "Generic RGBAL PAR",
            "Generic RGBCMY Wash",
            "Generic Indigo LED Bar",
        ],
    )
    @pytest.mark.parametrize("intensity", [None, 0.0, 0.37, 1.0])
    def test_values_in_dmx_range(self, preset, intensity) -> None:
        channels = get_preset(preset).build_channels()
        colors = [
            (0, 0, 0), (255, 255, 255), (255, 0, 0), (0, 255, 0), (0, 0, 255),
            (255, 128, 0), (75, 0, 130), (100, 255, 0), (12, 200, 190), (240, 10, 250),
        ]
        for rgb in colors:
            result = create_optimized_color_mapping(Color(r=rgb[0], g=rgb[1], b=rgb[2]), channels, intensity)
            for value in result.values():
                assert isinstance(value, int)
                assert 0 <= value <= 255

    def test_pure_and_does_not_modify_input(self, make_channels) -> None:
        channels = make_channels(DIM, R, G, B, W, A, U, ChannelRole.LIME, values=[90, 1, 2, 3, 4, 5, 6, 7])
        snapshot = [ch.model_copy() for ch in channels]
        color = Color(r=200, g=180, b=40)

        first = create_optimized_color_mapping(color, channels, intensity=0.6)
        second = create_optimized_color_mapping(color, channels, intensity=0.6)

        assert first == second
        assert channels == snapshot

    def test_accepts_integer_ids(self) -> None:
        channels = [Channel(id=10, role=R), Channel(id=11, role=G), Channel(id=12, role=B)]
        result = create_optimized_color_mapping(Color(r=255, g=0, b=0), channels)
        assert result == {10: 255, 11: 0, 12: 0}
