"""
Tensor- and configuration-related exceptions for KeyCaffe.

This module defines the error taxonomy shared by the tensor container and the
convolution parameter resolver. Errors fall into two families:

- `InputRejectedError` and its subclasses signal that a caller supplied bad
  input (a malformed shape, a mismatched operand, a conflicting layer
  configuration). They are recoverable: nothing is silently corrected and no
  partially built object escapes.
- `ContractViolationError` signals that an internal invariant was broken by
  the calling code itself (e.g. an index vector longer than the tensor rank).
  It deliberately does *not* derive from `InputRejectedError`, so callers can
  tell "your input was rejected" apart from "a programming error was detected".
"""

from __future__ import annotations

from typing import Any, Sequence


class InputRejectedError(ValueError):
    """
    Base class for all recoverable input-validation failures.
    """


class ContractViolationError(RuntimeError):
    """
    Raised when an internal usage contract is violated.

    This is the non-recoverable error family. It is raised for conditions that
    correct upstream validation should make impossible, for example:

    - computing an offset from more indices than the tensor has axes,
    - writing to a buffer through an invalid channel tag,
    - using legacy 4-axis accessors on a tensor with more than 4 axes.
    """

    def __init__(self, op: str, detail: str) -> None:
        """
        Initialize the ContractViolationError.

        Parameters
        ----------
        op : str
            Name of the operation that detected the violation.
        detail : str
            Human-readable description of the broken contract.
        """
        super().__init__(f"{op}: {detail}")
        self.op = op
        self.detail = detail


class InvalidShapeError(InputRejectedError):
    """
    Raised when a shape contains a non-positive (or non-integer) axis length.
    """

    def __init__(self, shape: Sequence[Any]) -> None:
        super().__init__(
            f"invalid shape {tuple(shape)!r}: every axis length must be a positive integer "
            "and at least one axis is required"
        )
        self.shape = tuple(shape)


class ExceedMaxAxesError(InputRejectedError):
    """
    Raised when a shape has more axes than the tensor container supports.
    """

    def __init__(self, num_axes: int, max_axes: int) -> None:
        super().__init__(f"shape exceeds maximum axes ({max_axes}): got {num_axes}")
        self.num_axes = num_axes
        self.max_axes = max_axes


class ShapeMismatchError(InputRejectedError):
    """
    Raised when a binary operation or reshape receives incompatible shapes.

    Attributes
    ----------
    op : str
        The operation that was attempted (e.g. "add", "reshape").
    lhs : tuple
        Shape of the receiving tensor.
    rhs : tuple
        Shape of the operand (or the requested target shape).
    """

    def __init__(self, op: str, lhs: Sequence[int], rhs: Sequence[int]) -> None:
        super().__init__(f"{op}: shape mismatch {tuple(lhs)!r} vs {tuple(rhs)!r}")
        self.op = op
        self.lhs = tuple(lhs)
        self.rhs = tuple(rhs)


class InvalidIndicesError(InputRejectedError):
    """
    Raised when index vectors do not agree with the tensor rank.
    """

    def __init__(self, op: str, detail: str) -> None:
        super().__init__(f"{op}: invalid indices, {detail}")
        self.op = op


class InvalidAxisError(InputRejectedError):
    """
    Raised when an axis index cannot be resolved against a tensor's rank.
    """

    def __init__(self, axis: int, num_axes: int) -> None:
        super().__init__(
            f"axis {axis} out of range for {num_axes}-D tensor "
            f"(expected {-num_axes} <= axis < {num_axes})"
        )
        self.axis = axis
        self.num_axes = num_axes


class LengthMismatchError(InputRejectedError):
    """
    Raised when a payload's element count disagrees with the declared capacity.
    """

    def __init__(self, field: str, expected: int, actual: int) -> None:
        super().__init__(
            f"{field}: count mismatch, expected {expected} elements, got {actual}"
        )
        self.field = field
        self.expected = expected
        self.actual = actual


class UnsupportedChannelError(InputRejectedError):
    """
    Raised when a channel tag is neither `data` nor `diff`.
    """

    def __init__(self, channel: Any) -> None:
        super().__init__(
            f"unsupported channel {channel!r}: expected 'data' or 'diff'"
        )
        self.channel = channel


class ConflictingSpecificationError(InputRejectedError):
    """
    Raised when mutually exclusive convolution parameter forms are combined,
    or when the height/width form is used outside 2D convolution.
    """

    def __init__(self, field: str, detail: str) -> None:
        super().__init__(f"{field}: {detail}")
        self.field = field


class InvalidSpecificationCountError(InputRejectedError):
    """
    Raised when a per-axis list has neither 1 nor one-per-spatial-axis entries.
    """

    def __init__(self, field: str, count: int, num_spatial_axes: int) -> None:
        super().__init__(
            f"{field} must be specified once, or once per spatial dimension "
            f"(got {count} values for {num_spatial_axes} spatial axes)"
        )
        self.field = field
        self.count = count
        self.num_spatial_axes = num_spatial_axes


class NonPositiveDimensionError(InputRejectedError):
    """
    Raised when a resolved convolution dimension violates its sign constraint.

    Kernel, stride and dilation entries must be strictly positive; padding
    entries must be non-negative.
    """

    def __init__(self, field: str, values: Sequence[int], constraint: str) -> None:
        super().__init__(f"{field} dimensions must be {constraint}: got {tuple(values)!r}")
        self.field = field
        self.values = tuple(values)
        self.constraint = constraint
