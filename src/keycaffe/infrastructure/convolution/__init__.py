"""
Convolution configuration, parameter resolution and layer setup.
"""

from ._conv_layer import ConvolutionLayer
from ._conv_param import ConvolutionParameter
from ._conv_param_resolver import (
    ConvGeometry,
    resolve_conv_geometry,
    resolve_conv_params,
    resolve_spatial_param,
)

__all__ = [
    "ConvGeometry",
    "ConvolutionLayer",
    "ConvolutionParameter",
    "resolve_conv_geometry",
    "resolve_conv_params",
    "resolve_spatial_param",
]
