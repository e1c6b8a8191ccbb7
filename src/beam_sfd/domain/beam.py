from __future__ import annotations
from dataclasses import dataclass, field
from typing import Tuple

from beam_sfd.domain.loads import Load
from beam_sfd.domain.supports import Support


@dataclass(frozen=True)
class Beam:
    length: float
    supports: Tuple[Support, ...] = field(default_factory=tuple)
    loads: Tuple[Load, ...] = field(default_factory=tuple)

    def __post_init__(self):
        # listas -> tuplas: la viga no cambia durante un análisis
        object.__setattr__(self, "supports", tuple(self.supports))
        object.__setattr__(self, "loads", tuple(self.loads))
