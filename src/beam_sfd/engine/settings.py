from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class AnalysisSettings:
    # Grilla de muestreo: paso = max(min_step, L / divisions)
    divisions: int = 500
    min_step: float = 0.01
    decimals: int = 4

    # False: solo exactamente 1 empotramiento o 1 pin + 1 rodillo.
    # True: se usa el primero de cada tipo y el resto se informa en notas.
    ignore_redundant_supports: bool = False

    # Tolerancia de residuales ΣFy / ΣM0
    equilibrium_tol: float = 1e-6

    def __post_init__(self):
        if int(self.divisions) <= 0:
            raise ValueError(f"divisions debe ser > 0 (divisions={self.divisions}).")
        if float(self.min_step) <= 0:
            raise ValueError(f"min_step debe ser > 0 (min_step={self.min_step}).")


DEFAULT_SETTINGS = AnalysisSettings()
