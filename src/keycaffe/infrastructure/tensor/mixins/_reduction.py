"""
Reduction operations producing Python floats.

- ``l1_norm`` : sum of absolute values
- ``l2_norm`` : sum of squares (note: *not* square-rooted)
- ``mul``     : inner product with another tensor
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from ....domain._channel import Channel, ChannelLike, as_channel
from ....domain._errors import ShapeMismatchError

if TYPE_CHECKING:
    from .._tensor import Tensor


class TensorMixinReduction:
    """
    Full-buffer reductions over the data or diff buffer.
    """

    def l1_norm(self: "Tensor", channel: ChannelLike = Channel.DATA) -> float:
        """
        Return the sum of absolute values of the selected buffer.
        """
        return float(np.sum(np.abs(self._buffer(channel))))

    def l2_norm(self: "Tensor", channel: ChannelLike = Channel.DATA) -> float:
        """
        Return the sum of squared values of the selected buffer.

        The name follows the historical convention; no square root is taken.
        """
        return float(np.sum(np.square(self._buffer(channel))))

    def mul(self: "Tensor", other: "Tensor", channel: ChannelLike = Channel.DATA) -> float:
        """
        Return the inner product of the selected buffers of `self` and `other`.

        Raises
        ------
        ShapeMismatchError
            If ``self.shape_equals(other)`` is False.
        UnsupportedChannelError
            If `channel` is neither data nor diff.
        """
        ch = as_channel(channel)
        if not self.shape_equals(other):
            raise ShapeMismatchError("mul", self.shape, other.shape)
        lhs = self._buffer(ch)
        rhs = other._buffer(ch)[: self.capacity]
        return float(np.dot(lhs, rhs))
