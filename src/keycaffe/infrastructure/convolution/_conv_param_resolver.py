"""
Convolution parameter resolution.

This module turns a raw `ConvolutionParameter` into a `ConvGeometry`: one
canonical integer per spatial axis for each of kernel shape, stride, padding
and dilation.

Resolution rules (per field, independently)
-------------------------------------------
1. Height/width form present (either entry non-zero):
   the geometry must be 2D and the list form must be empty, otherwise
   `ConflictingSpecificationError`. The result is ``(height, width)``.
2. Otherwise, by list length ``L``:

   - ``L == 0``: the field default on every axis (stride 1, pad 0,
     dilation 1). The kernel has no default and is rejected.
   - ``L == 1``: the single value broadcast to every axis.
   - ``L == num_spatial_axes``: copied positionally.
   - anything else: `InvalidSpecificationCountError`.
3. Kernel, stride and dilation entries must be > 0; padding entries >= 0
   (`NonPositiveDimensionError`).

Fields are resolved in the order kernel, stride, pad, dilation; the first
failure is raised.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from ...domain._errors import (
    ConflictingSpecificationError,
    InvalidIndicesError,
    InvalidSpecificationCountError,
    NonPositiveDimensionError,
)
from ...domain._tensor import ITensor
from ._conv_param import ConvolutionParameter

DEFAULT_STRIDE = 1
DEFAULT_PAD = 0
DEFAULT_DILATION = 1


@dataclass(frozen=True)
class ConvGeometry:
    """
    Canonical convolution geometry.

    Attributes
    ----------
    channel_axis : int
        Non-negative index of the channel axis in the input tensor.
    num_spatial_axes : int
        Number of axes following the channel axis.
    kernel_shape, stride, pad, dilation : tuple[int, ...]
        One entry per spatial axis.
    force_nd_im2col : bool
        Copied from the configuration.
    """

    channel_axis: int
    num_spatial_axes: int
    kernel_shape: Tuple[int, ...]
    stride: Tuple[int, ...]
    pad: Tuple[int, ...]
    dilation: Tuple[int, ...]
    force_nd_im2col: bool = False

    @property
    def use_nd_im2col(self) -> bool:
        """
        Whether the N-D im2col path applies (forced, or geometry is not 2D).
        """
        return self.force_nd_im2col or self.num_spatial_axes != 2


def resolve_spatial_param(
    values: Sequence[int],
    num_spatial_axes: int,
    *,
    field: str,
    list_name: Optional[str] = None,
    height: int = 0,
    width: int = 0,
    default: Optional[int] = None,
    allow_zero: bool = False,
) -> Tuple[int, ...]:
    """
    Resolve one convolution field into one integer per spatial axis.

    Parameters
    ----------
    values : Sequence[int]
        The list form of the field.
    num_spatial_axes : int
        Number of spatial axes of the input.
    field : str
        Field prefix used in error messages (e.g. "kernel", "stride").
    list_name : str, optional
        Name of the list form in error messages. Defaults to `field`.
    height, width : int, optional
        The height/width form; 0 means unset.
    default : int, optional
        Value used when the list form is empty. ``None`` makes an empty
        list an error.
    allow_zero : bool, optional
        Accept 0 entries (padding). Negative entries are always rejected.

    Returns
    -------
    tuple[int, ...]
        Resolved values, ``len == num_spatial_axes``.

    Raises
    ------
    ConflictingSpecificationError
        If the height/width form is used outside 2D, or combined with the
        list form.
    InvalidSpecificationCountError
        If the list form has an unsupported length.
    NonPositiveDimensionError
        If a resolved entry violates the sign constraint.
    """
    list_name = list_name or field
    values = [int(v) for v in values]

    if height != 0 or width != 0:
        if num_spatial_axes != 2:
            raise ConflictingSpecificationError(
                field,
                f"{field}_h & {field}_w can only be used for 2D convolution "
                f"(got {num_spatial_axes} spatial axes)",
            )
        if values:
            raise ConflictingSpecificationError(
                field,
                f"either {list_name} or {field}_h/w should be specified; not both",
            )
        resolved: Tuple[int, ...] = (int(height), int(width))
    elif not values:
        if default is None:
            raise InvalidSpecificationCountError(list_name, 0, num_spatial_axes)
        resolved = (default,) * num_spatial_axes
    elif len(values) == 1:
        resolved = (values[0],) * num_spatial_axes
    elif len(values) == num_spatial_axes:
        resolved = tuple(values)
    else:
        raise InvalidSpecificationCountError(list_name, len(values), num_spatial_axes)

    if allow_zero:
        if any(v < 0 for v in resolved):
            raise NonPositiveDimensionError(field, resolved, "non-negative")
    elif any(v <= 0 for v in resolved):
        raise NonPositiveDimensionError(field, resolved, "positive")
    return resolved


def resolve_conv_geometry(
    param: ConvolutionParameter,
    *,
    channel_axis: int,
    num_spatial_axes: int,
) -> ConvGeometry:
    """
    Resolve kernel/stride/pad/dilation for a known channel axis and rank.

    Parameters
    ----------
    param : ConvolutionParameter
        Raw configuration.
    channel_axis : int
        Canonical (non-negative) channel axis.
    num_spatial_axes : int
        Number of spatial axes (input rank minus channel axis minus one).

    Returns
    -------
    ConvGeometry
        The canonical geometry.

    Raises
    ------
    InvalidIndicesError
        If `num_spatial_axes` is negative.
    ConflictingSpecificationError, InvalidSpecificationCountError, NonPositiveDimensionError
        As raised by `resolve_spatial_param`.
    """
    if num_spatial_axes < 0:
        raise InvalidIndicesError(
            "resolve_conv_geometry",
            f"num_spatial_axes must be >= 0, got {num_spatial_axes}",
        )

    kernel_shape = resolve_spatial_param(
        param.kernel_size,
        num_spatial_axes,
        field="kernel",
        list_name="kernel_size",
        height=param.kernel_h,
        width=param.kernel_w,
    )
    stride = resolve_spatial_param(
        param.stride,
        num_spatial_axes,
        field="stride",
        height=param.stride_h,
        width=param.stride_w,
        default=DEFAULT_STRIDE,
    )
    pad = resolve_spatial_param(
        param.pad,
        num_spatial_axes,
        field="pad",
        height=param.pad_h,
        width=param.pad_w,
        default=DEFAULT_PAD,
        allow_zero=True,
    )
    dilation = resolve_spatial_param(
        param.dilation,
        num_spatial_axes,
        field="dilation",
        default=DEFAULT_DILATION,
    )

    return ConvGeometry(
        channel_axis=channel_axis,
        num_spatial_axes=num_spatial_axes,
        kernel_shape=kernel_shape,
        stride=stride,
        pad=pad,
        dilation=dilation,
        force_nd_im2col=param.force_nd_im2col,
    )


def resolve_conv_params(param: ConvolutionParameter, bottom: ITensor) -> ConvGeometry:
    """
    Resolve a configuration against the input tensor it will convolve.

    The channel axis is ``bottom.canonical_axis_index(param.axis)``; every
    following axis is spatial.

    Raises
    ------
    InvalidAxisError
        If `param.axis` is out of range for `bottom`.
    """
    channel_axis = bottom.canonical_axis_index(param.axis)
    return resolve_conv_geometry(
        param,
        channel_axis=channel_axis,
        num_spatial_axes=bottom.num_axes - channel_axis - 1,
    )
