"""Path effect definitions.

Effects are plain data; `pathfx.effects.apply_effect` interprets them. The
union is discriminated on `kind`, so pipelines can be loaded from JSON.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from pathfx.types.paths import Path
from pathfx.types.stamps import StampStyle


class DashEffect(BaseModel):
    """Alternating on/off lengths, shifted by phase."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["dash"] = "dash"
    intervals: tuple[float, ...] = ()
    phase: float = 0.0

    @property
    def produces_path(self) -> bool:
        return True


class CornerRoundEffect(BaseModel):
    """Replace sharp corners with arcs of the given radius."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["corner_round"] = "corner_round"
    radius: float

    @property
    def produces_path(self) -> bool:
        return True


class StampEffect(BaseModel):
    """Repeat a shape along the path every `advance` units."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["stamp"] = "stamp"
    shape: Path
    advance: float
    phase: float = 0.0
    style: StampStyle = StampStyle.ROTATE

    @property
    def produces_path(self) -> bool:
        return False


class ChainEffect(BaseModel):
    """Apply `inner` first, then `outer` to its result."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["chain"] = "chain"
    outer: "PathEffect"
    inner: "PathEffect"

    @property
    def produces_path(self) -> bool:
        return self.outer.produces_path


PathEffect = Annotated[
    DashEffect | CornerRoundEffect | StampEffect | ChainEffect,
    Field(discriminator="kind"),
]

ChainEffect.model_rebuild()
