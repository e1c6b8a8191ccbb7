from __future__ import annotations

from typing import Dict


class BeamAnalysisError(ValueError):
    """
    Error base del motor. Todas las fallas de entrada se detectan ANTES de
    muestrear y se propagan sin recuperación local.
    """
    kind: str = "BeamAnalysisError"

    def to_dict(self) -> Dict[str, str]:
        return {"error": self.kind, "message": str(self)}


class InvalidGeometry(BeamAnalysisError):
    """Longitud no positiva o apoyos coincidentes (sistema singular)."""
    kind = "InvalidGeometry"


class UnsupportedConfiguration(BeamAnalysisError):
    """Combinación de apoyos sin regla cerrada (p.ej. dos rodillos)."""
    kind = "UnsupportedConfiguration"


class MalformedLoad(BeamAnalysisError):
    kind = "MalformedLoad"


class MalformedSupport(BeamAnalysisError):
    kind = "MalformedSupport"
