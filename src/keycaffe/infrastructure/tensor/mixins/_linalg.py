"""
Batched matrix multiply over the legacy (num, channels, height, width) layout.

Both operands are treated as grids of ``height x width`` matrices indexed by
their (num, channels) pair. Every matrix of the left operand is multiplied
with every matrix of the right operand; the result therefore has shape::

    (self.num * other.num, self.channels * other.channels,
     self.height, other.width)

and matrix ``(n1, c1) x (n2, c2)`` is stored at
``(n1 * other.num + n2, c1 * other.channels + c2)``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ....domain._channel import Channel, ChannelLike, as_channel
from ....domain._errors import ShapeMismatchError

if TYPE_CHECKING:
    from .._tensor import Tensor


class TensorMixinLinalg:
    """
    Matrix multiply built from row/column extraction and `mul`.
    """

    def _row(self: "Tensor", n: int, c: int, h: int, channel: Channel) -> "Tensor":
        # [1, 1, 1, width] copy of row h of matrix (n, c)
        out = self.__class__([1, 1, 1, self.width])
        for i in range(self.width):
            out.set([0, 0, 0, i], self.get([n, c, h, i], channel), channel)
        return out

    def _col(self: "Tensor", n: int, c: int, w: int, channel: Channel) -> "Tensor":
        # [1, 1, 1, height] copy of column w of matrix (n, c)
        out = self.__class__([1, 1, 1, self.height])
        for i in range(self.height):
            out.set([0, 0, 0, i], self.get([n, c, i, w], channel), channel)
        return out

    def matrix_multiply(
        self: "Tensor", other: "Tensor", channel: ChannelLike = Channel.DATA
    ) -> "Tensor":
        """
        Multiply every matrix of ``self`` with every matrix of `other`.

        Parameters
        ----------
        other : Tensor
            Right operand. Its legacy height must equal ``self.width``.
        channel : Channel or str, optional
            Buffer read from both operands and written in the result.

        Returns
        -------
        Tensor
            New rank-4 tensor holding all pairwise matrix products.

        Raises
        ------
        ShapeMismatchError
            If either operand is not rank 4, or ``self.width != other.height``.
        UnsupportedChannelError
            If `channel` is neither data nor diff.
        """
        ch = as_channel(channel)
        if self.num_axes != 4 or other.num_axes != 4:
            raise ShapeMismatchError("matrix_multiply", self.shape, other.shape)
        if self.width != other.height:
            raise ShapeMismatchError("matrix_multiply", self.shape, other.shape)

        out = self.__class__(
            [
                self.num * other.num,
                self.channels * other.channels,
                self.height,
                other.width,
            ]
        )

        for n1 in range(self.num):
            for n2 in range(other.num):
                for c1 in range(self.channels):
                    for c2 in range(other.channels):
                        n_out = n1 * other.num + n2
                        c_out = c1 * other.channels + c2
                        for h in range(self.height):
                            row = self._row(n1, c1, h, ch)
                            for w in range(other.width):
                                col = other._col(n2, c2, w, ch)
                                out.set([n_out, c_out, h, w], row.mul(col, ch), ch)
        return out
