"""Shared fixtures for color mixing tests."""

from typing import Callable, Optional

import pytest

from config import Channel, ChannelMapping, ChannelRole


def _build_channels(*roles: ChannelRole, values: Optional[list[int]] = None) -> list[Channel]:
    """Channels with ids "1", "2", ... in role order."""
    values = values or [0] * len(roles)
    return [
        Channel(id=str(i + 1), role=role, value=value)
        for i, (role, value) in enumerate(zip(roles, values))
    ]


@pytest.fixture
def make_channels() -> Callable[..., list[Channel]]:
    return _build_channels


@pytest.fixture
def apply_mapping() -> Callable[[list[Channel], ChannelMapping], list[Channel]]:
    """Write a mapping back onto a channel list, as a caller persisting it would."""
    def apply(channels: list[Channel], mapping: ChannelMapping) -> list[Channel]:
        return [
            ch.model_copy(update={"value": mapping.get(ch.id, ch.value)})
            for ch in channels
        ]
    return apply
