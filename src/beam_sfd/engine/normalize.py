from __future__ import annotations

import math
from typing import Any, List, Mapping

from beam_sfd.domain.beam import Beam
from beam_sfd.domain.errors import (
    InvalidGeometry, MalformedLoad, MalformedSupport, UnsupportedConfiguration
)
from beam_sfd.domain.labels import (
    LOAD_KINDS, LOAD_MOMENT, LOAD_POINT, LOAD_REQUIRED_FIELDS, LOAD_TRIANGULAR, LOAD_UDL,
    SUPPORT_KINDS, normalize_tag,
)
from beam_sfd.domain.loads import DistTriangular, DistUniform, Load, PointForce, PointMoment
from beam_sfd.domain.supports import Support


def _as_float(value: Any) -> float:
    """Número finito o ValueError (bool y None no se aceptan)."""
    if value is None or isinstance(value, bool):
        raise ValueError(f"valor no numérico: {value!r}")
    v = float(value)
    if not math.isfinite(v):
        raise ValueError(f"valor no finito: {value!r}")
    return v


# -------------------------
# Payload -> dominio
# -------------------------
def beam_from_payload(payload: Mapping[str, Any]) -> Beam:
    """
    Convierte el payload del editor:
      {length, supports: [{type, position}], loads: [{type, magnitude, position?, start?, end?}]}
    en un Beam inmutable. Solo chequea forma y tipos; los rangos se validan en validate_beam.
    """
    if not isinstance(payload, Mapping):
        raise InvalidGeometry(f"Payload inválido: se esperaba un objeto, llegó {type(payload).__name__}.")

    try:
        L = _as_float(payload.get("length"))
    except (TypeError, ValueError) as e:
        raise InvalidGeometry(f"Longitud de viga inválida: {e}") from e

    raw_supports = payload.get("supports") or []
    raw_loads = payload.get("loads") or []
    if not isinstance(raw_supports, (list, tuple)):
        raise MalformedSupport("'supports' debe ser una lista.")
    if not isinstance(raw_loads, (list, tuple)):
        raise MalformedLoad("'loads' debe ser una lista.")

    supports = [_support_from_dict(i, s) for i, s in enumerate(raw_supports)]
    loads = [_load_from_dict(i, l) for i, l in enumerate(raw_loads)]

    return Beam(length=L, supports=tuple(supports), loads=tuple(loads))


def _support_from_dict(idx: int, raw: Any) -> Support:
    if not isinstance(raw, Mapping):
        raise MalformedSupport(f"Apoyo #{idx}: se esperaba un objeto {{type, position}}.")
    kind = normalize_tag(raw.get("type"))
    if kind not in SUPPORT_KINDS:
        raise MalformedSupport(f'Apoyo #{idx}: tipo desconocido "{raw.get("type")}" (válidos: {", ".join(SUPPORT_KINDS)}).')
    if "position" not in raw:
        raise MalformedSupport(f"Apoyo #{idx} ({kind}): falta 'position'.")
    try:
        x = _as_float(raw["position"])
    except (TypeError, ValueError) as e:
        raise MalformedSupport(f"Apoyo #{idx} ({kind}): position inválida ({e}).") from e
    return Support(kind=kind, position=x)


def _load_from_dict(idx: int, raw: Any) -> Load:
    if not isinstance(raw, Mapping):
        raise MalformedLoad(f"Carga #{idx}: se esperaba un objeto con 'type'.")
    kind = normalize_tag(raw.get("type"))
    if kind not in LOAD_KINDS:
        raise MalformedLoad(f'Carga #{idx}: tipo desconocido "{raw.get("type")}" (válidos: {", ".join(LOAD_KINDS)}).')

    values = {}
    for name in LOAD_REQUIRED_FIELDS[kind]:
        if name not in raw:
            raise MalformedLoad(f"Carga #{idx} ({kind}): falta '{name}'.")
        try:
            values[name] = _as_float(raw[name])
        except (TypeError, ValueError) as e:
            raise MalformedLoad(f"Carga #{idx} ({kind}): '{name}' inválido ({e}).") from e

    if kind == LOAD_POINT:
        return PointForce(**values)
    if kind == LOAD_MOMENT:
        return PointMoment(**values)
    if kind == LOAD_UDL:
        return DistUniform(**values)
    return DistTriangular(**values)


# -------------------------
# Validación (antes de cualquier cálculo)
# -------------------------
def validate_beam(beam: Beam) -> List[str]:
    """
    Valida geometría, apoyos y cargas. Lanza la excepción correspondiente
    ante el primer problema; devuelve notas no fatales.
    """
    notes: List[str] = []

    try:
        L = _as_float(beam.length)
    except (TypeError, ValueError) as e:
        raise InvalidGeometry(f"Longitud de viga inválida: {e}") from e
    if L <= 0:
        raise InvalidGeometry(f"La longitud de la viga debe ser > 0 (L={L:g}).")

    if not beam.supports:
        raise UnsupportedConfiguration("La viga no tiene apoyos.")

    # 1) Apoyos ([0, L] estricto: la grilla termina exactamente en L)
    for i, s in enumerate(beam.supports):
        if not isinstance(s, Support) or s.kind not in SUPPORT_KINDS:
            raise MalformedSupport(f"Apoyo #{i}: registro inválido ({s!r}).")
        try:
            x = _as_float(s.position)
        except (TypeError, ValueError) as e:
            raise MalformedSupport(f"Apoyo #{i} ({s.kind}): position inválida ({e}).") from e
        if x < 0.0 or x > L:
            raise MalformedSupport(f"Apoyo #{i} ({s.kind}) fuera de la viga: x={x:g} no está en [0, {L:g}].")

    # 2) Cargas
    for i, load in enumerate(beam.loads):
        if not isinstance(load, (PointForce, PointMoment, DistUniform, DistTriangular)):
            raise MalformedLoad(f"Carga #{i}: tipo no soportado ({type(load).__name__}).")
        try:
            _as_float(load.magnitude)
        except (TypeError, ValueError) as e:
            raise MalformedLoad(f"Carga #{i} ({load.tag}): magnitude inválida ({e}).") from e

        if isinstance(load, (PointForce, PointMoment)):
            try:
                x = _as_float(load.position)
            except (TypeError, ValueError) as e:
                raise MalformedLoad(f"Carga #{i} ({load.tag}): position inválida ({e}).") from e
            if x < 0.0 or x > L:
                raise MalformedLoad(f"Carga #{i} ({load.tag}) fuera de la viga: x={x:g} no está en [0, {L:g}].")
            continue

        try:
            x1 = _as_float(load.start)
            x2 = _as_float(load.end)
        except (TypeError, ValueError) as e:
            raise MalformedLoad(f"Carga #{i} ({load.tag}): tramo inválido ({e}).") from e
        if x2 < x1:
            raise MalformedLoad(f"Carga #{i} ({load.tag}): start > end ([{x1:g}, {x2:g}]).")
        if x1 < 0.0 or x2 > L:
            raise MalformedLoad(f"Carga #{i} ({load.tag}) fuera de la viga: [{x1:g}, {x2:g}] no está en [0, {L:g}].")
        if x2 - x1 <= 0.0:
            notes.append(f"Carga #{i} ({load.tag}) de longitud nula en x={x1:g}: no aporta.")

    return notes
