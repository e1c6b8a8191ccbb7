from __future__ import annotations

from typing import Dict, Literal

# Tags del payload (tal cual los envía el editor)
SUPPORT_PIN = "pin"
SUPPORT_ROLLER = "roller"
SUPPORT_FIXED = "fixed"

SupportKind = Literal["pin", "roller", "fixed"]
SUPPORT_KINDS = (SUPPORT_PIN, SUPPORT_ROLLER, SUPPORT_FIXED)

LOAD_POINT = "point"
LOAD_UDL = "udl"
LOAD_MOMENT = "moment"
LOAD_TRIANGULAR = "triangular"

LOAD_KINDS = (LOAD_POINT, LOAD_UDL, LOAD_MOMENT, LOAD_TRIANGULAR)

# Campos obligatorios por tag de carga
LOAD_REQUIRED_FIELDS: Dict[str, tuple] = {
    LOAD_POINT: ("magnitude", "position"),
    LOAD_MOMENT: ("magnitude", "position"),
    LOAD_UDL: ("magnitude", "start", "end"),
    LOAD_TRIANGULAR: ("magnitude", "start", "end"),
}

SUPPORT_DISPLAY: Dict[str, str] = {
    SUPPORT_PIN: "Pin",
    SUPPORT_ROLLER: "Roller",
    SUPPORT_FIXED: "Fixed",
}

LOAD_DISPLAY: Dict[str, str] = {
    LOAD_POINT: "Point Load",
    LOAD_UDL: "UDL",
    LOAD_MOMENT: "Moment",
    LOAD_TRIANGULAR: "UVL",
}


def normalize_tag(tag) -> str:
    """' Pin ' -> 'pin'. Devuelve '' si no es texto."""
    if not isinstance(tag, str):
        return ""
    return tag.strip().lower()


def reaction_label(idx: int) -> str:
    """
    Nombre de reacción por orden: R_A, R_B, ...
    (mismo criterio que el panel de cálculo detallado)
    """
    return f"R_{chr(ord('A') + int(idx))}"
