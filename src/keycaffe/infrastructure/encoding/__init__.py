"""
Wire-format encoding for KeyCaffe.

Public API
----------
- ``BlobShape`` / ``BlobProto``            : serialized tensor messages
- ``ConvolutionParameterProto``            : convolution layer configuration
- ``LayerParameterProto``                  : layer envelope (config + learned blobs)
- ``parse_message``                        : bytes-or-message coercion helper
"""

from ._caffe_proto import (
    BlobProto,
    BlobShape,
    ConvolutionParameterProto,
    LayerParameterProto,
    parse_message,
)

__all__ = [
    "BlobProto",
    "BlobShape",
    "ConvolutionParameterProto",
    "LayerParameterProto",
    "parse_message",
]
