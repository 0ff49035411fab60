"""
Protocol Buffers schema for the Caffe wire format.

This module builds the subset of the Caffe message schema used by KeyCaffe
(`BlobShape`, `BlobProto`, `ConvolutionParameter`, `LayerParameter` and the
`Phase` enum) directly from descriptor protos at import time, and exposes the
resulting message classes.

Building descriptors programmatically keeps the package free of protoc output
(whose generated code is tied to a specific protobuf runtime version) while
remaining byte-compatible with messages produced by any Caffe implementation:
field numbers, wire types, packing and defaults follow `caffe.proto`.

Message summary
---------------
BlobShape
    dim (1, repeated int64, packed)
BlobProto
    num (1), channels (2), height (3), width (4)    -- legacy 4-tuple, int32
    data (5), diff (6)                              -- packed float32
    shape (7)                                       -- BlobShape
    double_data (8), double_diff (9)                -- packed float64
ConvolutionParameter
    num_output (1), bias_term (2), pad (3), kernel_size (4), group (5),
    stride (6), pad_h (9), pad_w (10), kernel_h (11), kernel_w (12),
    stride_h (13), stride_w (14), axis (16), force_nd_im2col (17),
    dilation (18)
LayerParameter
    name (1), type (2), bottom (3), top (4), blobs (7), phase (10),
    convolution_param (106)
"""

from __future__ import annotations

from typing import Any, Optional, Type, TypeVar, Union

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory
from google.protobuf.message import DecodeError, Message

_F = descriptor_pb2.FieldDescriptorProto

_PACKAGE = "caffe"

M = TypeVar("M", bound=Message)


def _add_field(
    msg: descriptor_pb2.DescriptorProto,
    name: str,
    number: int,
    field_type: int,
    *,
    repeated: bool = False,
    packed: bool = False,
    type_name: Optional[str] = None,
    default: Optional[str] = None,
) -> None:
    f = msg.field.add()
    f.name = name
    f.number = number
    f.type = field_type
    f.label = _F.LABEL_REPEATED if repeated else _F.LABEL_OPTIONAL
    if type_name is not None:
        f.type_name = f".{_PACKAGE}.{type_name}"
    if default is not None:
        f.default_value = default
    if packed:
        f.options.packed = True


def _build_file_descriptor() -> descriptor_pb2.FileDescriptorProto:
    fdp = descriptor_pb2.FileDescriptorProto()
    fdp.name = "keycaffe/caffe.proto"
    fdp.package = _PACKAGE
    fdp.syntax = "proto2"

    phase = fdp.enum_type.add()
    phase.name = "Phase"
    for label, number in (("TRAIN", 0), ("TEST", 1)):
        v = phase.value.add()
        v.name = label
        v.number = number

    shape = fdp.message_type.add()
    shape.name = "BlobShape"
    _add_field(shape, "dim", 1, _F.TYPE_INT64, repeated=True, packed=True)

    blob = fdp.message_type.add()
    blob.name = "BlobProto"
    _add_field(blob, "shape", 7, _F.TYPE_MESSAGE, type_name="BlobShape")
    _add_field(blob, "data", 5, _F.TYPE_FLOAT, repeated=True, packed=True)
    _add_field(blob, "diff", 6, _F.TYPE_FLOAT, repeated=True, packed=True)
    _add_field(blob, "double_data", 8, _F.TYPE_DOUBLE, repeated=True, packed=True)
    _add_field(blob, "double_diff", 9, _F.TYPE_DOUBLE, repeated=True, packed=True)
    for name, number in (("num", 1), ("channels", 2), ("height", 3), ("width", 4)):
        _add_field(blob, name, number, _F.TYPE_INT32, default="0")

    conv = fdp.message_type.add()
    conv.name = "ConvolutionParameter"
    _add_field(conv, "num_output", 1, _F.TYPE_UINT32)
    _add_field(conv, "bias_term", 2, _F.TYPE_BOOL, default="true")
    _add_field(conv, "pad", 3, _F.TYPE_UINT32, repeated=True)
    _add_field(conv, "kernel_size", 4, _F.TYPE_UINT32, repeated=True)
    _add_field(conv, "stride", 6, _F.TYPE_UINT32, repeated=True)
    _add_field(conv, "dilation", 18, _F.TYPE_UINT32, repeated=True)
    for name, number in (
        ("pad_h", 9),
        ("pad_w", 10),
        ("kernel_h", 11),
        ("kernel_w", 12),
        ("stride_h", 13),
        ("stride_w", 14),
    ):
        _add_field(conv, name, number, _F.TYPE_UINT32, default="0")
    _add_field(conv, "group", 5, _F.TYPE_UINT32, default="1")
    _add_field(conv, "axis", 16, _F.TYPE_INT32, default="1")
    _add_field(conv, "force_nd_im2col", 17, _F.TYPE_BOOL, default="false")

    layer = fdp.message_type.add()
    layer.name = "LayerParameter"
    _add_field(layer, "name", 1, _F.TYPE_STRING)
    _add_field(layer, "type", 2, _F.TYPE_STRING)
    _add_field(layer, "bottom", 3, _F.TYPE_STRING, repeated=True)
    _add_field(layer, "top", 4, _F.TYPE_STRING, repeated=True)
    _add_field(layer, "phase", 10, _F.TYPE_ENUM, type_name="Phase")
    _add_field(layer, "blobs", 7, _F.TYPE_MESSAGE, repeated=True, type_name="BlobProto")
    _add_field(
        layer,
        "convolution_param",
        106,
        _F.TYPE_MESSAGE,
        type_name="ConvolutionParameter",
    )

    return fdp


_POOL = descriptor_pool.DescriptorPool()
_POOL.AddSerializedFile(_build_file_descriptor().SerializeToString())


def _message_class(name: str) -> Type[Message]:
    return message_factory.GetMessageClass(
        _POOL.FindMessageTypeByName(f"{_PACKAGE}.{name}")
    )


BlobShape = _message_class("BlobShape")
BlobProto = _message_class("BlobProto")
ConvolutionParameterProto = _message_class("ConvolutionParameter")
LayerParameterProto = _message_class("LayerParameter")


def parse_message(cls: Type[M], payload: Union[bytes, bytearray, memoryview, Any]) -> M:
    """
    Coerce `payload` into a message of type `cls`.

    Parameters
    ----------
    cls : type
        Target message class (e.g. `BlobProto`).
    payload : bytes-like or Message
        Either serialized bytes, or an already-parsed message of type `cls`.

    Returns
    -------
    Message
        A parsed message instance.

    Raises
    ------
    TypeError
        If `payload` is neither bytes-like nor an instance of `cls`.
    ValueError
        If the bytes cannot be decoded as `cls`.
    """
    if isinstance(payload, cls):
        return payload
    if isinstance(payload, (bytes, bytearray, memoryview)):
        msg = cls()
        try:
            msg.ParseFromString(bytes(payload))
        except DecodeError as e:
            raise ValueError(
                f"cannot decode {cls.DESCRIPTOR.name} from {len(payload)} bytes"
            ) from e
        return msg
    raise TypeError(
        f"expected bytes or {cls.DESCRIPTOR.name}, got {type(payload).__name__}"
    )
