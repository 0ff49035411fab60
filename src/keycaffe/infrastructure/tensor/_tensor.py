"""
Concrete Tensor implementation (NumPy backend).

This module provides the concrete `Tensor` container that satisfies the
domain-level `ITensor` protocol. A tensor owns exactly two flat float64
buffers of identical length:

- ``data``: the value buffer,
- ``diff``: the gradient buffer,

together with a shape of 1..32 strictly positive axis lengths. The buffer
length (`capacity`) always equals the product of the shape.

Design notes
------------
- Buffers are private, contiguous 1-D NumPy arrays. No two tensors ever share
  a buffer; every operation producing a new tensor copies.
- Operation groups (element-wise, reductions, matrix multiply, legacy 4-axis
  accessors, shape/indexing, serialization) live in mixins under
  `keycaffe.infrastructure.tensor.mixins` and are composed here.
- Mixins construct new tensors via `self.__class__` / `cls` so they never
  import this module.
"""

from __future__ import annotations

import math
import operator
from typing import Any, Iterable, Sequence

import numpy as np

from ...domain._channel import Channel, ChannelLike, as_channel
from ...domain._errors import (
    ContractViolationError,
    ExceedMaxAxesError,
    InvalidAxisError,
    InvalidShapeError,
    LengthMismatchError,
    UnsupportedChannelError,
)
from ...domain._tensor import ITensor, MAX_TENSOR_AXES
from .mixins import (
    TensorMixinElementwise,
    TensorMixinLegacyAxes,
    TensorMixinLinalg,
    TensorMixinReduction,
    TensorMixinSerialization,
    TensorShapeAndIndexingMixin,
)


def _normalize_shape(shape: Iterable[Any]) -> tuple[int, ...]:
    """
    Validate a user-supplied shape and return it as a tuple of ints.

    Raises
    ------
    ExceedMaxAxesError
        If the shape has more than `MAX_TENSOR_AXES` entries.
    InvalidShapeError
        If the shape is empty, or any entry is not a positive integer.
    """
    dims = list(shape)
    if len(dims) > MAX_TENSOR_AXES:
        raise ExceedMaxAxesError(len(dims), MAX_TENSOR_AXES)
    if not dims:
        raise InvalidShapeError(dims)

    out = []
    for d in dims:
        if isinstance(d, bool):
            raise InvalidShapeError(dims)
        try:
            v = operator.index(d)
        except TypeError:
            raise InvalidShapeError(dims) from None
        if v <= 0:
            raise InvalidShapeError(dims)
        out.append(v)
    return tuple(out)


class Tensor(
    TensorMixinElementwise,
    TensorMixinReduction,
    TensorMixinLinalg,
    TensorMixinLegacyAxes,
    TensorShapeAndIndexingMixin,
    TensorMixinSerialization,
    ITensor,
):
    """
    Dense N-dimensional array with paired value and gradient buffers.

    Parameters
    ----------
    shape : Iterable[int]
        Axis lengths. Must contain between 1 and 32 strictly positive
        integers.

    Raises
    ------
    ExceedMaxAxesError
        If `shape` has more than 32 entries.
    InvalidShapeError
        If `shape` is empty or contains a non-positive entry.

    Notes
    -----
    - Both buffers are zero-filled on construction.
    - Validation happens before any allocation: a failed construction never
      produces a partially initialized object.
    """

    def __init__(self, shape: Iterable[int]) -> None:
        self._shape: tuple[int, ...] = _normalize_shape(shape)
        self._capacity: int = math.prod(self._shape)
        self._data: np.ndarray = np.zeros(self._capacity, dtype=np.float64)
        self._diff: np.ndarray = np.zeros(self._capacity, dtype=np.float64)

    @classmethod
    def zeros(cls, shape: Iterable[int]) -> "Tensor":
        """
        Create a tensor whose value and gradient buffers are all zeros.
        """
        return cls(shape)

    @classmethod
    def full(
        cls,
        shape: Iterable[int],
        fill_value: float,
        channel: ChannelLike = Channel.DATA,
    ) -> "Tensor":
        """
        Create a tensor with one channel filled with a constant value.

        The other channel stays zero-filled.

        Parameters
        ----------
        shape : Iterable[int]
            Desired tensor shape.
        fill_value : float
            Constant written into every element of the selected buffer.
        channel : Channel or str, optional
            Buffer to fill. Defaults to `Channel.DATA`.

        Returns
        -------
        Tensor
            A newly allocated tensor.

        Raises
        ------
        InvalidShapeError, ExceedMaxAxesError
            If `shape` is invalid.
        UnsupportedChannelError
            If `channel` is neither data nor diff.
        """
        dims = _normalize_shape(shape)
        ch = as_channel(channel)
        t = cls(dims)
        t.fill(fill_value, ch)
        return t

    # ------------------------------------------------------------------
    # Shape metadata
    # ------------------------------------------------------------------
    @property
    def shape(self) -> tuple[int, ...]:
        return self._shape

    @property
    def num_axes(self) -> int:
        return len(self._shape)

    @property
    def capacity(self) -> int:
        return self._capacity

    def shape_of(self, index: int) -> int:
        """
        Return the length of axis `index` (negative values count from the end).
        """
        return self._shape[self.canonical_axis_index(index)]

    def canonical_axis_index(self, axis: int) -> int:
        """
        Resolve a possibly-negative axis index against this tensor's rank.

        Parameters
        ----------
        axis : int
            Axis index in ``[-num_axes, num_axes)``.

        Returns
        -------
        int
            The equivalent index in ``[0, num_axes)``.

        Raises
        ------
        InvalidAxisError
            If `axis` lies outside ``[-num_axes, num_axes)``.
        """
        n = self.num_axes
        if not -n <= axis < n:
            raise InvalidAxisError(axis, n)
        return axis + n if axis < 0 else axis

    # ------------------------------------------------------------------
    # Element access
    # ------------------------------------------------------------------
    def _buffer(self, channel: ChannelLike) -> np.ndarray:
        return self._data if as_channel(channel) is Channel.DATA else self._diff

    def offset(self, indices: Sequence[int]) -> int:
        """
        Compute the flat buffer position of a multi-index.

        Axes are visited in declared order, accumulating
        ``offset = offset * shape[i] + index[i]``. An index contributes only
        when ``0 < index[i] < shape[i]``; zero, negative and out-of-bounds
        indices (and axes not covered by `indices`) contribute 0. Out-of-range
        indices are therefore clamped to the first element of their axis
        rather than rejected.

        Parameters
        ----------
        indices : Sequence[int]
            Per-axis indices. May be shorter than the rank.

        Returns
        -------
        int
            Flat position in ``[0, capacity)``.

        Raises
        ------
        ContractViolationError
            If more indices than axes are supplied.
        """
        idx = list(indices)
        if len(idx) > self.num_axes:
            raise ContractViolationError(
                "offset",
                f"{len(idx)} indices supplied for a {self.num_axes}-axis tensor",
            )

        off = 0
        for i, dim in enumerate(self._shape):
            off *= dim
            if i < len(idx) and 0 < idx[i] < dim:
                off += int(idx[i])
        return off

    def get(self, indices: Sequence[int], channel: ChannelLike = Channel.DATA) -> float:
        """
        Read one element of the selected buffer at `offset(indices)`.

        Raises
        ------
        UnsupportedChannelError
            If `channel` is neither data nor diff.
        ContractViolationError
            If more indices than axes are supplied.
        """
        buf = self._buffer(channel)
        return float(buf[self.offset(indices)])

    def set(
        self,
        indices: Sequence[int],
        value: float,
        channel: ChannelLike = Channel.DATA,
    ) -> None:
        """
        Write one element of the selected buffer at `offset(indices)`.

        Raises
        ------
        ContractViolationError
            If `channel` is neither data nor diff, or more indices than axes
            are supplied.
        """
        try:
            buf = self._buffer(channel)
        except UnsupportedChannelError as e:
            raise ContractViolationError("set", str(e)) from e
        buf[self.offset(indices)] = value

    # ------------------------------------------------------------------
    # Copies and host interop
    # ------------------------------------------------------------------
    def duplicate(self) -> "Tensor":
        """
        Return a new tensor with the same shape and independent copies of
        both buffers.
        """
        out = self.__class__(self._shape)
        out._data[:] = self._data
        out._diff[:] = self._diff
        return out

    def to_numpy(self, channel: ChannelLike = Channel.DATA) -> np.ndarray:
        """
        Return a shaped float64 copy of the selected buffer.
        """
        return self._buffer(channel).reshape(self._shape).copy()

    def copy_from_numpy(self, arr: Any, channel: ChannelLike = Channel.DATA) -> None:
        """
        Overwrite the selected buffer with the elements of `arr` (C order).

        Raises
        ------
        LengthMismatchError
            If `arr` does not hold exactly `capacity` elements.
        """
        buf = self._buffer(channel)
        src = np.asarray(arr, dtype=np.float64)
        if src.size != self._capacity:
            raise LengthMismatchError("copy_from_numpy", self._capacity, int(src.size))
        buf[:] = src.reshape(-1)

    def __str__(self) -> str:
        dims = "".join(f"{d} " for d in self._shape)
        return f"{dims}({self._capacity})"

    def __repr__(self) -> str:
        return f"Tensor(shape={self._shape}, capacity={self._capacity})"
