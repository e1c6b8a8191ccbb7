from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from beam_sfd.domain.cases import BeamSupportPattern
from beam_sfd.domain.labels import SupportKind


@dataclass(frozen=True)
class Reaction:
    kind: SupportKind
    position: float
    force: float                    # up+
    moment: Optional[float] = None  # solo empotramiento (se suma tal cual a M(x))


@dataclass(frozen=True)
class ResponseSample:
    x: float
    shear: float
    moment: float


@dataclass(frozen=True)
class EquilibriumResult:
    pattern: BeamSupportPattern
    reactions: List[Reaction]

    residual_Fy: float       # debería ~0
    residual_M0: float       # debería ~0 (momento respecto a x=0)

    notes: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class AnalysisResult:
    x: np.ndarray
    V: np.ndarray
    M: np.ndarray

    reactions: List[Reaction]

    max_shear: float
    min_shear: float
    max_moment: float
    min_moment: float

    pattern: Optional[BeamSupportPattern] = None
    residual_Fy: float = 0.0
    residual_M0: float = 0.0
    notes: List[str] = field(default_factory=list)

    @property
    def samples(self) -> List[ResponseSample]:
        return [
            ResponseSample(x=float(xi), shear=float(vi), moment=float(mi))
            for xi, vi, mi in zip(self.x, self.V, self.M)
        ]
