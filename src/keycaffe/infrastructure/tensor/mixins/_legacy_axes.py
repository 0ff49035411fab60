"""
Legacy 4-axis accessors for tensors of rank <= 4.

Historically every blob was addressed as (num, channels, height, width). This
mixin keeps those accessor names available as a *derived, read-only* view of
the general N-axis shape: nothing is stored, every value is recomputed from
`shape`, so the two addressing schemes cannot drift apart.
"""

from __future__ import annotations

from ....domain._errors import ContractViolationError
from ....domain._tensor import LEGACY_MAX_AXES


class TensorMixinLegacyAxes:
    """
    Read-only (num, channels, height, width) view over `shape`.

    Notes
    -----
    Missing trailing axes read as 1 (implicit broadcast), so a ``[2, 3]``
    tensor reports ``num == 2``, ``channels == 3``, ``height == width == 1``.
    """

    def legacy_axis(self, index: int) -> int:
        """
        Return the length of legacy axis `index`.

        Parameters
        ----------
        index : int
            Legacy axis (0..3 are num, channels, height, width); negative
            values count from the end.

        Returns
        -------
        int
            ``shape[index]`` when the axis exists, otherwise 1 (any index
            outside ``[-num_axes, num_axes)``, however large).

        Raises
        ------
        ContractViolationError
            If the tensor has more than 4 axes.
        """
        n = self.num_axes
        if n > LEGACY_MAX_AXES:
            raise ContractViolationError(
                "legacy_axis",
                f"cannot use legacy accessors on tensors with > {LEGACY_MAX_AXES} axes "
                f"(got {n})",
            )
        if index >= n or index < -n:
            return 1
        return self.shape[index]

    @property
    def num(self) -> int:
        return self.legacy_axis(0)

    @property
    def channels(self) -> int:
        return self.legacy_axis(1)

    @property
    def height(self) -> int:
        return self.legacy_axis(2)

    @property
    def width(self) -> int:
        return self.legacy_axis(3)
