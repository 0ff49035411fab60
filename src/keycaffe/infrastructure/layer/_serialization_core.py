"""
Layer registry and JSON config nodes.

Layers are flat (no child layers), so a node is just the registered type name
plus the layer's own `get_config()` dict. `ConvolutionLayer` registers
itself as "Convolution"; `layer_from_config` dispatches on that name.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Type

_LAYER_REGISTRY: dict[str, Type[Any]] = {}


def register_layer(name: Optional[str] = None) -> Callable[[Type[Any]], Type[Any]]:
    """
    Decorator to register a layer class for JSON deserialization.
    """

    def deco(cls: Type[Any]) -> Type[Any]:
        key = name or cls.__name__
        _LAYER_REGISTRY[key] = cls
        return cls

    return deco


def layer_to_config(layer: Any) -> Dict[str, Any]:
    """
    Convert a layer into a JSON-serializable configuration node.

    Node format
    -----------
    {
      "type": "Convolution",
      "config": {...}
    }
    """
    type_name = getattr(layer, "layer_type", layer.__class__.__name__)

    get_cfg = getattr(layer, "get_config", None)
    cfg = get_cfg() if callable(get_cfg) else {}

    return {"type": type_name, "config": cfg}


def layer_from_config(node: Dict[str, Any]) -> Any:
    """
    Rebuild a layer from a configuration node.
    """
    type_name = str(node["type"])
    if type_name not in _LAYER_REGISTRY:
        raise ValueError(
            f"Unknown layer type '{type_name}'. Register it via @register_layer."
        )

    cls = _LAYER_REGISTRY[type_name]
    cfg = node.get("config", {}) or {}

    from_cfg = getattr(cls, "from_config", None)
    if callable(from_cfg):
        return from_cfg(cfg)
    return cls(**cfg)
