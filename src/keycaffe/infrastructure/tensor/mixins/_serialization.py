"""
BlobProto serialization for tensors.

Encoding
--------
`to_proto` / `serialize` always emit the general ``shape.dim`` form and the
64-bit ``double_data`` payload; ``double_diff`` is emitted only on request.
The legacy (num, channels, height, width) tuple and the 32-bit payloads are
never written.

Decoding
--------
`from_proto` / `deserialize` accept anything a Caffe implementation writes:

- the legacy 4-tuple is used when any of its fields is non-zero, otherwise
  ``shape.dim``;
- for each channel the 32-bit payload takes precedence over the 64-bit one
  when both are present (a `RuntimeWarning` is emitted);
- a payload whose length differs from the capacity is rejected.
"""

from __future__ import annotations

import warnings
from typing import TYPE_CHECKING, Any, Sequence, Type, TypeVar

import numpy as np

from ....domain._errors import LengthMismatchError
from ...encoding._caffe_proto import BlobProto, parse_message

if TYPE_CHECKING:
    from .._tensor import Tensor

T = TypeVar("T", bound="TensorMixinSerialization")


def _load_payload(
    dst: np.ndarray,
    single: Sequence[float],
    double: Sequence[float],
    field: str,
    stacklevel: int,
) -> None:
    if len(single) > 0:
        if len(double) > 0:
            warnings.warn(
                f"BlobProto carries both '{field}' and 'double_{field}'; "
                f"using the 32-bit '{field}' payload",
                RuntimeWarning,
                stacklevel=stacklevel,
            )
        name, src = field, single
    elif len(double) > 0:
        name, src = f"double_{field}", double
    else:
        return

    if len(src) != dst.size:
        raise LengthMismatchError(name, int(dst.size), len(src))
    dst[:] = np.asarray(list(src), dtype=np.float64)


class TensorMixinSerialization:
    """
    Conversion between tensors and `BlobProto` messages.
    """

    def to_proto(self: "Tensor", include_gradient: bool = False) -> Any:
        """
        Build a `BlobProto` message describing this tensor.

        Parameters
        ----------
        include_gradient : bool, optional
            Whether to also emit the gradient buffer as ``double_diff``.

        Returns
        -------
        BlobProto
            The populated message.
        """
        msg = BlobProto()
        msg.shape.dim.extend(self.shape)
        msg.double_data.extend(self._data.tolist())
        if include_gradient:
            msg.double_diff.extend(self._diff.tolist())
        return msg

    def serialize(self: "Tensor", include_gradient: bool = False) -> bytes:
        """
        Return the wire encoding of `to_proto(include_gradient)`.
        """
        return self.to_proto(include_gradient).SerializeToString()

    @classmethod
    def from_proto(cls: Type[T], message: Any) -> T:
        """
        Reconstruct a tensor from a `BlobProto` message (or its bytes).

        Raises
        ------
        InvalidShapeError, ExceedMaxAxesError
            If the declared shape is not a valid tensor shape.
        LengthMismatchError
            If a payload's length differs from the declared capacity.
        """
        return cls._from_message(parse_message(BlobProto, message))

    @classmethod
    def deserialize(cls: Type[T], payload: bytes) -> T:
        """
        Decode a serialized `BlobProto` into a new tensor.
        """
        return cls._from_message(parse_message(BlobProto, payload))

    @classmethod
    def _from_message(cls: Type[T], msg: Any) -> T:
        # _load_payload -> _from_message -> from_proto/deserialize -> caller
        stacklevel = 4
        if msg.num != 0 or msg.channels != 0 or msg.height != 0 or msg.width != 0:
            shape = [msg.num, msg.channels, msg.height, msg.width]
        else:
            shape = list(msg.shape.dim)

        out = cls(shape)
        _load_payload(out._data, msg.data, msg.double_data, "data", stacklevel)
        _load_payload(out._diff, msg.diff, msg.double_diff, "diff", stacklevel)
        return out
