"""
Convolution layer setup for KeyCaffe.

This module defines `ConvolutionLayer`, the user-facing owner of a convolution
configuration and its learned tensors. Its responsibility is the *setup*
phase: validating the configuration against the input tensor's rank and
deriving the canonical `ConvGeometry` (channel axis, spatial axis count and
per-axis kernel/stride/pad/dilation).

Current limitations
-------------------
- No forward/backward computation (im2col and the convolution math are
  provided elsewhere).
- Learned tensors (`blobs`) are carried through construction and the wire
  format but are not interpreted.

Example
-------
>>> param = ConvolutionParameter(num_output=16, kernel_size=(3,), pad=(1,))
>>> layer = ConvolutionLayer(param)
>>> layer.setup([Tensor([2, 3, 32, 32])])
>>> layer.geometry.kernel_shape
(3, 3)
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from ...domain._errors import InvalidIndicesError
from ...domain._layer import Phase
from ...domain._tensor import ITensor
from ..encoding._caffe_proto import LayerParameterProto, parse_message
from ..layer._serialization_core import register_layer
from ..tensor._tensor import Tensor
from ._conv_param import ConvolutionParameter
from ._conv_param_resolver import ConvGeometry, resolve_conv_params

LAYER_TYPE = "Convolution"


@register_layer(LAYER_TYPE)
class ConvolutionLayer:
    """
    Convolution layer (setup only).

    Parameters
    ----------
    param : ConvolutionParameter, optional
        Raw convolution configuration. Defaults to an empty configuration,
        which fails `setup` until a kernel size is provided.
    blobs : Sequence[Tensor], optional
        Learned tensors (weights, optional bias) owned by the layer.
    phase : Phase, optional
        Network phase. Defaults to `Phase.TRAIN`.
    name : str, optional
        Layer name.

    Attributes
    ----------
    geometry : Optional[ConvGeometry]
        Canonical geometry, available after a successful `setup`.
    """

    def __init__(
        self,
        param: Optional[ConvolutionParameter] = None,
        *,
        blobs: Sequence[Tensor] = (),
        phase: Phase = Phase.TRAIN,
        name: str = "",
    ) -> None:
        self.param = param if param is not None else ConvolutionParameter()
        self.blobs: List[Tensor] = list(blobs)
        self.phase = Phase(phase)
        self.name = name
        self.geometry: Optional[ConvGeometry] = None

    @property
    def layer_type(self) -> str:
        return LAYER_TYPE

    def setup(self, bottom: Sequence[ITensor]) -> None:
        """
        Resolve the configuration against the first input tensor.

        On failure the previously resolved geometry (if any) is kept.

        Raises
        ------
        InvalidIndicesError
            If `bottom` is empty.
        InvalidAxisError
            If ``param.axis`` is out of range for the input.
        ConflictingSpecificationError, InvalidSpecificationCountError, NonPositiveDimensionError
            If the kernel/stride/pad/dilation settings are invalid.
        """
        if len(bottom) == 0:
            raise InvalidIndicesError("setup", "Convolution layer needs a bottom tensor")
        self.geometry = resolve_conv_params(self.param, bottom[0])

    # -------------------------------------------------------------------------
    # Wire format
    # -------------------------------------------------------------------------
    @classmethod
    def from_proto(cls, layer_parameter: Any) -> "ConvolutionLayer":
        """
        Build a layer from a `LayerParameter` message (or its bytes).

        Learned blobs are reconstructed with `Tensor.from_proto`.

        Raises
        ------
        ValueError
            If the message declares a layer type other than "Convolution".
        """
        msg = parse_message(LayerParameterProto, layer_parameter)
        if msg.type and msg.type != LAYER_TYPE:
            raise ValueError(
                f"Cannot build a {LAYER_TYPE} layer from a '{msg.type}' LayerParameter"
            )
        return cls(
            ConvolutionParameter.from_proto(msg.convolution_param),
            blobs=[Tensor.from_proto(b) for b in msg.blobs],
            phase=Phase(msg.phase),
            name=msg.name,
        )

    def to_proto(self, include_gradient: bool = False) -> Any:
        """
        Build a `LayerParameter` message holding the configuration and blobs.
        """
        msg = LayerParameterProto()
        msg.name = self.name
        msg.type = LAYER_TYPE
        msg.phase = int(self.phase)
        msg.convolution_param.CopyFrom(self.param.to_proto())
        for b in self.blobs:
            msg.blobs.add().CopyFrom(b.to_proto(include_gradient))
        return msg

    # -------------------------------------------------------------------------
    # JSON config
    # -------------------------------------------------------------------------
    def get_config(self) -> Dict[str, Any]:
        """
        Return a JSON-serializable configuration for reconstructing this layer.

        Notes
        -----
        Learned blobs are not part of the configuration; they travel through
        `to_proto`.
        """
        return {
            "name": self.name,
            "phase": self.phase.name,
            "param": self.param.get_config(),
        }

    @classmethod
    def from_config(cls, cfg: Dict[str, Any]) -> "ConvolutionLayer":
        """
        Construct a layer from a configuration dict.
        """
        phase_cfg = cfg.get("phase", Phase.TRAIN.name)
        phase = Phase[phase_cfg] if isinstance(phase_cfg, str) else Phase(phase_cfg)
        return cls(
            ConvolutionParameter.from_config(cfg.get("param", {}) or {}),
            phase=phase,
            name=str(cfg.get("name", "")),
        )
