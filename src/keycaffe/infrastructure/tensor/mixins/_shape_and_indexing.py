"""
Tensor shape, indexing, and structural ops mixin.

This module defines `TensorShapeAndIndexingMixin`, which groups the methods
that compare or change the logical shape of a tensor (`shape_equals`,
`reshape`) and that move rectangular blocks of elements between tensors
(`range`, `set_num_channel`).

Design notes
------------
- New tensors are constructed via `self.__class__`, so this module never
  imports the concrete `Tensor`.
- Every result owns fresh buffers; nothing here returns a view.
"""

from __future__ import annotations

import itertools
import math
import operator
from typing import TYPE_CHECKING, Iterable, Sequence

from ....domain._channel import Channel, ChannelLike, as_channel
from ....domain._errors import (
    InvalidIndicesError,
    InvalidShapeError,
    ShapeMismatchError,
)

if TYPE_CHECKING:
    from .._tensor import Tensor


class TensorShapeAndIndexingMixin:
    """
    Shape comparison, reshape and block-copy operations.
    """

    def shape_equals(self: "Tensor", other: "Tensor") -> bool:
        """
        Return whether `other` matches this tensor on every axis of ``self``.

        The comparison is one-sided: only the axes of ``self`` are inspected,
        so a ``[2, 3]`` tensor equals a ``[2, 3, 1]`` (or ``[2, 3, 4]``)
        operand, while the reverse comparison is False because the operand
        lacks the third axis.
        """
        other_shape = other.shape
        if len(other_shape) < len(self.shape):
            return False
        return all(a == b for a, b in zip(self.shape, other_shape))

    def reshape(self: "Tensor", new_shape: Iterable[int]) -> "Tensor":
        """
        Return a copy of this tensor relabelled with `new_shape`.

        Element order is preserved in both buffers.

        Parameters
        ----------
        new_shape : Iterable[int]
            Target shape; its product must equal `capacity`.

        Returns
        -------
        Tensor
            A new tensor sharing no buffers with ``self``.

        Raises
        ------
        ShapeMismatchError
            If the element count of `new_shape` differs from `capacity`.
        InvalidShapeError, ExceedMaxAxesError
            If `new_shape` is otherwise not a valid shape.
        """
        dims = list(new_shape)
        try:
            count = math.prod(operator.index(d) for d in dims)
        except TypeError:
            raise InvalidShapeError(dims) from None
        if count != self.capacity:
            raise ShapeMismatchError("reshape", self.shape, dims)

        out = self.__class__(dims)
        out._data[:] = self._data
        out._diff[:] = self._diff
        return out

    def range(
        self: "Tensor",
        low: Sequence[int],
        high: Sequence[int],
        channel: ChannelLike = Channel.DATA,
    ) -> "Tensor":
        """
        Extract the half-open box ``[low, high)`` of a 4-axis tensor.

        The result has shape ``high[i] - low[i]`` per axis, with zero-length
        spans floored to 1. Element ``low + k`` of the source lands at
        position ``k`` of the result, in the selected buffer; with
        ``low = [0, 0, 1, 1]`` the source element ``[0, 0, 1, 1]`` becomes
        ``out[0, 0, 0, 0]``.

        Raises
        ------
        InvalidIndicesError
            If the tensor is not rank 4, or either corner does not have
            exactly 4 entries.
        InvalidShapeError
            If any span is negative.
        UnsupportedChannelError
            If `channel` is neither data nor diff.
        """
        lo = list(low)
        hi = list(high)
        if self.num_axes != 4 or len(lo) != 4 or len(hi) != 4:
            raise InvalidIndicesError(
                "range",
                f"expected a 4-axis tensor and two 4-entry corners, got rank "
                f"{self.num_axes} with corners of length {len(lo)} and {len(hi)}",
            )
        ch = as_channel(channel)

        out = self.__class__([(h - l) or 1 for l, h in zip(lo, hi)])
        for idx in itertools.product(*(range(l, h) for l, h in zip(lo, hi))):
            rel = [i - l for i, l in zip(idx, lo)]
            out.set(rel, self.get(idx, ch), ch)
        return out

    def set_num_channel(
        self: "Tensor",
        n: int,
        c: int,
        other: "Tensor",
        channel: ChannelLike = Channel.DATA,
    ) -> None:
        """
        Copy a single ``[1, 1, H, W]`` plane into plane ``(n, c)`` of this
        4-axis tensor.

        Raises
        ------
        InvalidIndicesError
            If either tensor is not rank 4.
        ShapeMismatchError
            If the planes differ in height/width, or `other` is not a single
            plane.
        """
        if self.num_axes != 4 or other.num_axes != 4:
            raise InvalidIndicesError(
                "set_num_channel",
                f"expected 4-axis tensors, got ranks {self.num_axes} and {other.num_axes}",
            )
        if self.width != other.width or self.height != other.height:
            raise ShapeMismatchError("set_num_channel", self.shape, other.shape)
        if other.num != 1 or other.channels != 1:
            raise ShapeMismatchError("set_num_channel", (1, 1) + self.shape[2:], other.shape)
        ch = as_channel(channel)

        for h in range(self.height):
            for w in range(self.width):
                self.set([n, c, h, w], other.get([0, 0, h, w], ch), ch)
