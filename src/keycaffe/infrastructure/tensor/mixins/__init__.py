"""
Tensor operation mixins for KeyCaffe.

This package groups the operation families composed into the concrete
`Tensor` class:

- `TensorMixinElementwise`      : fill / shift / scale / powx / exp / add / dot
- `TensorMixinReduction`        : l1_norm / l2_norm / mul
- `TensorMixinLinalg`           : matrix_multiply
- `TensorMixinLegacyAxes`       : num / channels / height / width
- `TensorShapeAndIndexingMixin` : shape_equals / reshape / range / set_num_channel
- `TensorMixinSerialization`    : to_proto / serialize / from_proto / deserialize
"""

from ._elementwise import TensorMixinElementwise
from ._legacy_axes import TensorMixinLegacyAxes
from ._linalg import TensorMixinLinalg
from ._reduction import TensorMixinReduction
from ._serialization import TensorMixinSerialization
from ._shape_and_indexing import TensorShapeAndIndexingMixin

__all__ = [
    TensorMixinElementwise.__name__,
    TensorMixinLegacyAxes.__name__,
    TensorMixinLinalg.__name__,
    TensorMixinReduction.__name__,
    TensorMixinSerialization.__name__,
    TensorShapeAndIndexingMixin.__name__,
]
