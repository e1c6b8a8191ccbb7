from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple, Union

from beam_sfd.domain.supports import Support


@dataclass(frozen=True)
class Cantilever:
    """
    Ménsula: empotramiento único que toma fuerza y momento.
    ignored: apoyos presentes que no participan (solo si se permiten).
    """
    fixed: Support
    ignored: Tuple[Support, ...] = field(default_factory=tuple)

    name = "cantilever"


@dataclass(frozen=True)
class SimplySupported:
    """Viga simplemente apoyada: articulación (pin) + rodillo (roller)."""
    pin: Support
    roller: Support
    ignored: Tuple[Support, ...] = field(default_factory=tuple)

    name = "simply_supported"


@dataclass(frozen=True)
class Unsupported:
    reason: str

    name = "unsupported"


BeamSupportPattern = Union[Cantilever, SimplySupported, Unsupported]
