"""
Element-wise tensor operations.

This module declares :class:`TensorMixinElementwise`, which implements the
in-place scalar transforms (`fill`, `shift`, `scale`, `powx`, `exp`) and the
element-wise binary operations (`add`, `dot`) over a selected buffer.

Binary operations use the asymmetric `shape_equals` check of the receiver:
every axis of ``self`` must match the corresponding axis of ``other``, but
``other`` may carry extra trailing axes. Only the first ``self.capacity``
elements of the operand buffer participate.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from ....domain._channel import Channel, ChannelLike, as_channel
from ....domain._errors import ShapeMismatchError

if TYPE_CHECKING:
    from .._tensor import Tensor


class TensorMixinElementwise:
    """
    Element-wise operations over the data or diff buffer.
    """

    def fill(self: "Tensor", value: float, channel: ChannelLike = Channel.DATA) -> None:
        """
        Set every element of the selected buffer to `value`.
        """
        self._buffer(channel).fill(value)

    def shift(self: "Tensor", delta: float, channel: ChannelLike = Channel.DATA) -> None:
        """
        Add `delta` to every element of the selected buffer (in place).
        """
        buf = self._buffer(channel)
        np.add(buf, delta, out=buf)

    def scale(self: "Tensor", factor: float, channel: ChannelLike = Channel.DATA) -> None:
        """
        Multiply every element of the selected buffer by `factor` (in place).
        """
        buf = self._buffer(channel)
        np.multiply(buf, factor, out=buf)

    def powx(self: "Tensor", exponent: float, channel: ChannelLike = Channel.DATA) -> None:
        """
        Raise every element of the selected buffer to `exponent` (in place).

        Notes
        -----
        Follows IEEE semantics: a negative base with a non-integral exponent
        yields NaN, and ``0 ** negative`` yields +inf.
        """
        buf = self._buffer(channel)
        with np.errstate(divide="ignore", invalid="ignore"):
            np.power(buf, exponent, out=buf)

    def exp(self: "Tensor", channel: ChannelLike = Channel.DATA) -> None:
        """
        Replace every element of the selected buffer by its exponential.
        """
        buf = self._buffer(channel)
        with np.errstate(over="ignore"):
            np.exp(buf, out=buf)

    def add(self: "Tensor", other: "Tensor", channel: ChannelLike = Channel.DATA) -> None:
        """
        Accumulate `other` into this tensor element-wise (in place).

        Parameters
        ----------
        other : Tensor
            Operand; must satisfy ``self.shape_equals(other)``.
        channel : Channel or str, optional
            Buffer of both tensors to operate on. Defaults to data.

        Raises
        ------
        ShapeMismatchError
            If the shapes are incompatible.
        UnsupportedChannelError
            If `channel` is neither data nor diff.
        """
        ch = as_channel(channel)
        if not self.shape_equals(other):
            raise ShapeMismatchError("add", self.shape, other.shape)

        buf = self._buffer(ch)
        np.add(buf, other._buffer(ch)[: self.capacity], out=buf)

    def dot(self: "Tensor", other: "Tensor", channel: ChannelLike = Channel.DATA) -> "Tensor":
        """
        Element-wise product into a new tensor.

        The product is written to the selected buffer of the result; the other
        buffer of the result stays zero.

        Notes
        -----
        For the diff channel the product is ``self.data * other.diff`` (the
        receiver's *value* buffer times the operand's gradient buffer), not
        ``self.diff * other.diff``.

        Raises
        ------
        ShapeMismatchError
            If the shapes are incompatible.
        UnsupportedChannelError
            If `channel` is neither data nor diff.
        """
        ch = as_channel(channel)
        if not self.shape_equals(other):
            raise ShapeMismatchError("dot", self.shape, other.shape)

        out = self.__class__(self.shape)
        rhs = other._buffer(ch)[: self.capacity]
        np.multiply(self._data, rhs, out=out._buffer(ch))
        return out
