"""
Convolution layer configuration.

`ConvolutionParameter` mirrors the `ConvolutionParameter` message of the
configuration protocol. It carries the raw, user-supplied form of the
kernel/stride/padding/dilation settings; turning them into canonical per-axis
integers is the job of `resolve_conv_geometry`.

Each of kernel, stride and padding can be given in two mutually exclusive
forms:

- a height/width pair (``kernel_h``/``kernel_w`` etc.), 2D only, and
- a list (``kernel_size`` etc.) holding either one value broadcast to every
  spatial axis, or one value per spatial axis.

A height/width pair counts as "present" when either entry is non-zero.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, Iterable, Tuple

from ..encoding._caffe_proto import ConvolutionParameterProto, parse_message

_LIST_FIELDS = ("pad", "kernel_size", "stride", "dilation")
_SCALAR_FIELDS = (
    "num_output",
    "pad_h",
    "pad_w",
    "kernel_h",
    "kernel_w",
    "stride_h",
    "stride_w",
    "group",
    "axis",
)
_BOOL_FIELDS = ("bias_term", "force_nd_im2col")


def _as_int_tuple(values: Iterable[Any]) -> Tuple[int, ...]:
    if isinstance(values, int):
        return (int(values),)
    return tuple(int(v) for v in values)


@dataclass
class ConvolutionParameter:
    """
    Raw convolution configuration.

    Parameters
    ----------
    num_output : int
        Number of output channels.
    bias_term : bool
        Whether the layer carries a learnable bias.
    pad, kernel_size, stride, dilation : tuple[int, ...]
        Per-axis list forms (0, 1, or one-per-spatial-axis entries). A bare
        int is accepted and stored as a 1-tuple.
    pad_h, pad_w, kernel_h, kernel_w, stride_h, stride_w : int
        Height/width forms, usable only for 2D convolution. 0 means unset.
    group : int
        Number of filter groups.
    axis : int
        Channel axis of the input; negative values count from the end.
    force_nd_im2col : bool
        Request the N-D im2col path even for 2D geometry.
    """

    num_output: int = 0
    bias_term: bool = True
    pad: Tuple[int, ...] = ()
    kernel_size: Tuple[int, ...] = ()
    stride: Tuple[int, ...] = ()
    dilation: Tuple[int, ...] = ()
    pad_h: int = 0
    pad_w: int = 0
    kernel_h: int = 0
    kernel_w: int = 0
    stride_h: int = 0
    stride_w: int = 0
    group: int = 1
    axis: int = 1
    force_nd_im2col: bool = False

    def __post_init__(self) -> None:
        for name in _LIST_FIELDS:
            setattr(self, name, _as_int_tuple(getattr(self, name)))
        for name in _SCALAR_FIELDS:
            setattr(self, name, int(getattr(self, name)))
        for name in _BOOL_FIELDS:
            setattr(self, name, bool(getattr(self, name)))

    # ------------------------------------------------------------------
    # JSON config
    # ------------------------------------------------------------------
    def get_config(self) -> Dict[str, Any]:
        """
        Return a JSON-serializable dict of every field.
        """
        cfg: Dict[str, Any] = {}
        for f in fields(self):
            v = getattr(self, f.name)
            cfg[f.name] = list(v) if isinstance(v, tuple) else v
        return cfg

    @classmethod
    def from_config(cls, cfg: Dict[str, Any]) -> "ConvolutionParameter":
        """
        Construct a parameter set from a configuration dict.

        Missing keys fall back to their defaults.

        Raises
        ------
        ValueError
            If `cfg` contains keys that are not convolution parameters.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(cfg) - known)
        if unknown:
            raise ValueError(f"Unknown ConvolutionParameter keys: {unknown}")
        return cls(**cfg)

    # ------------------------------------------------------------------
    # Wire format
    # ------------------------------------------------------------------
    def to_proto(self) -> Any:
        """
        Build a `ConvolutionParameter` protobuf message.

        Raises
        ------
        ValueError
            If an unsigned field holds a negative value.
        """
        msg = ConvolutionParameterProto()
        for name in _LIST_FIELDS:
            getattr(msg, name).extend(getattr(self, name))
        for name in _SCALAR_FIELDS + _BOOL_FIELDS:
            setattr(msg, name, getattr(self, name))
        return msg

    @classmethod
    def from_proto(cls, message: Any) -> "ConvolutionParameter":
        """
        Construct a parameter set from a protobuf message (or its bytes).
        """
        msg = parse_message(ConvolutionParameterProto, message)
        kwargs: Dict[str, Any] = {}
        for name in _LIST_FIELDS:
            kwargs[name] = tuple(getattr(msg, name))
        for name in _SCALAR_FIELDS + _BOOL_FIELDS:
            kwargs[name] = getattr(msg, name)
        return cls(**kwargs)
