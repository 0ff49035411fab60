"""
Layer interface definitions.

This module defines the domain-level interface for network layers using
structural subtyping via `typing.Protocol`.

Only the setup contract is modelled here: a layer validates its configuration
against the shapes of its input tensors and derives whatever canonical
geometry it needs. Forward/backward computation is provided by concrete
layers that implement it.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Dict, Protocol, Sequence, runtime_checkable

from ._tensor import ITensor


class Phase(IntEnum):
    """
    Network phase a layer is instantiated for.

    Values match the `Phase` enum of the configuration protocol.
    """

    TRAIN = 0
    TEST = 1


@runtime_checkable
class ILayer(Protocol):
    """
    Domain-level layer interface.

    Notes
    -----
    - Any object implementing `layer_type`, `setup` and `get_config` is
      considered a valid layer.
    - This interface is safe to use with `isinstance` checks due to the
      `@runtime_checkable` decorator.
    """

    @property
    def layer_type(self) -> str:
        """
        Return the registered type name of the layer (e.g. "Convolution").
        """
        ...

    def setup(self, bottom: Sequence[ITensor]) -> None:
        """
        Validate the layer configuration against its input tensors.

        Parameters
        ----------
        bottom : Sequence[ITensor]
            Input tensors of the layer.
        """
        ...

    def get_config(self) -> Dict[str, Any]:
        """
        Return a JSON-serializable configuration for reconstructing the layer.
        """
        ...
