from __future__ import annotations
from dataclasses import dataclass

from beam_sfd.domain.labels import SupportKind


@dataclass(frozen=True)
class Support:
    """
    Apoyo puntual sobre la viga.
    kind: "pin" | "roller" | "fixed"
    position: en [0, L]
    """
    kind: SupportKind
    position: float
