"""
Buffer channel selection.

Every tensor owns two flat buffers of identical length: the value buffer
("data") and the gradient buffer ("diff"). Operations that read or write a
buffer take a `Channel` to select which one.

This module defines:

- `Channel`: the enumeration of the two buffer channels
- `as_channel`: strict normalization of user-facing channel tags
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Union

from ._errors import UnsupportedChannelError


class Channel(Enum):
    """
    Enumeration of tensor buffer channels.

    Attributes
    ----------
    DATA : Channel
        The value buffer.
    DIFF : Channel
        The gradient buffer.
    """

    DATA = "data"
    DIFF = "diff"


ChannelLike = Union[Channel, str]


def as_channel(channel: Any) -> Channel:
    """
    Normalize a channel tag into a `Channel` member.

    Parameters
    ----------
    channel : Channel or str
        A `Channel` member, or one of the strings "data" / "diff"
        (case-insensitive).

    Returns
    -------
    Channel
        The normalized channel.

    Raises
    ------
    UnsupportedChannelError
        If `channel` does not name either buffer.
    """
    if isinstance(channel, Channel):
        return channel
    if isinstance(channel, str):
        try:
            return Channel(channel.lower())
        except ValueError:
            pass
    raise UnsupportedChannelError(channel)
