"""
Tensor interface definitions.

This module defines the domain-level interface for the dual-buffer tensor
container using structural typing. The interface captures the properties the
layer code depends on (shape arity and axis resolution) together with the
element access contract, without coupling to the NumPy-backed implementation.

Notes
-----
Layers only need a small slice of the full tensor API (e.g. the convolution
layer reads `num_axes` and calls `canonical_axis_index`). Typing against this
protocol keeps them independent from the concrete `Tensor` class.
"""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from ._channel import ChannelLike

MAX_TENSOR_AXES = 32
"""int: Maximum number of axes a tensor shape may have."""

LEGACY_MAX_AXES = 4
"""int: Maximum rank for which the (num, channels, height, width) accessors are defined."""


@runtime_checkable
class ITensor(Protocol):
    """
    Tensor interface.

    An `ITensor` is a dense N-dimensional array owning a value buffer and a
    gradient buffer of identical length (`capacity == product(shape)`).
    """

    @property
    def shape(self) -> tuple[int, ...]:
        """
        Return the shape of the tensor.

        Returns
        -------
        tuple[int, ...]
            Ordered, strictly positive axis lengths.
        """
        ...

    @property
    def num_axes(self) -> int:
        """
        Return the number of axes (rank) of the tensor.
        """
        ...

    @property
    def capacity(self) -> int:
        """
        Return the number of elements in each buffer.
        """
        ...

    def canonical_axis_index(self, axis: int) -> int:
        """
        Resolve a possibly-negative axis index against the tensor rank.

        Parameters
        ----------
        axis : int
            Axis index in ``[-num_axes, num_axes)``.

        Returns
        -------
        int
            Non-negative axis index.
        """
        ...

    def offset(self, indices: Sequence[int]) -> int:
        """
        Compute the flat buffer position of a multi-index.
        """
        ...

    def get(self, indices: Sequence[int], channel: ChannelLike = ...) -> float:
        """
        Read one element from the selected buffer.
        """
        ...

    def set(
        self, indices: Sequence[int], value: float, channel: ChannelLike = ...
    ) -> None:
        """
        Write one element into the selected buffer.
        """
        ...
