from __future__ import annotations

import logging
import math
from typing import Iterable, List, Optional, Sequence, Tuple

from beam_sfd.domain.beam import Beam
from beam_sfd.domain.cases import BeamSupportPattern, Cantilever, SimplySupported, Unsupported
from beam_sfd.domain.errors import InvalidGeometry, MalformedLoad, UnsupportedConfiguration
from beam_sfd.domain.labels import SUPPORT_FIXED, SUPPORT_PIN, SUPPORT_ROLLER
from beam_sfd.domain.loads import DistTriangular, DistUniform, Load, PointForce, PointMoment
from beam_sfd.domain.results import EquilibriumResult, Reaction
from beam_sfd.domain.supports import Support
from beam_sfd.engine.normalize import validate_beam
from beam_sfd.engine.settings import AnalysisSettings, DEFAULT_SETTINGS

logger = logging.getLogger(__name__)


def _first(supports: Sequence[Support], kind: str) -> Optional[int]:
    for i, s in enumerate(supports):
        if s.kind == kind:
            return i
    return None


def _describe(supports: Iterable[Support]) -> str:
    return ", ".join(f"{s.kind}@{s.position:g}" for s in supports) or "sin apoyos"


def classify_supports(
    supports: Sequence[Support],
    *,
    ignore_redundant: bool = False,
) -> BeamSupportPattern:
    """
    Clasifica el conjunto de apoyos ANTES de resolver:
      - Cantilever: hay un empotramiento (tiene prioridad sobre pin/rodillo)
      - SimplySupported: un pin y un rodillo, sin empotramiento
      - Unsupported(reason): cualquier otro caso

    Solo participa el primer apoyo de cada tipo (en orden de entrada). El resto es
    redundante (viga hiperestática): con ignore_redundant=False eso es Unsupported.
    """
    supports = list(supports)
    if not supports:
        return Unsupported(reason="la viga no tiene apoyos")

    i_fixed = _first(supports, SUPPORT_FIXED)
    i_pin = _first(supports, SUPPORT_PIN)
    i_roller = _first(supports, SUPPORT_ROLLER)

    if i_fixed is not None:
        active: Tuple[int, ...] = (i_fixed,)
    elif i_pin is not None and i_roller is not None:
        active = (i_pin, i_roller)
    else:
        return Unsupported(
            reason=f"sin regla cerrada para [{_describe(supports)}] "
                   f"(se requiere 1 empotramiento o 1 pin + 1 rodillo)"
        )

    ignored = tuple(s for i, s in enumerate(supports) if i not in active)
    if ignored and not ignore_redundant:
        return Unsupported(
            reason=f"apoyos redundantes [{_describe(ignored)}] junto a "
                   f"[{_describe(supports[i] for i in active)}]: viga hiperestática"
        )

    if i_fixed is not None:
        return Cantilever(fixed=supports[i_fixed], ignored=ignored)
    return SimplySupported(pin=supports[i_pin], roller=supports[i_roller], ignored=ignored)


def _load_resultant(load: Load, x_ref: float) -> Tuple[float, float]:
    """
    (F, M) de una carga: F down+, M horario+ respecto a x_ref.
    Momento aplicado (CCW+) => no aporta F, aporta -magnitude.
    """
    if isinstance(load, PointForce):
        P = float(load.magnitude)
        return P, P * (float(load.position) - x_ref)
    if isinstance(load, (DistUniform, DistTriangular)):
        F_res = load.resultant
        return F_res, F_res * (load.centroid - x_ref)
    if isinstance(load, PointMoment):
        return 0.0, -float(load.magnitude)
    raise MalformedLoad(f"Carga no soportada: {type(load).__name__}")


def _sum_load_contributions(loads: Sequence[Load], x_ref: float) -> Tuple[float, float]:
    """
    Devuelve:
      Fy: suma de fuerzas aplicadas (down+)
      M_ref: suma de momentos respecto a x_ref (horario+)
    """
    Fy = 0.0
    M_ref = 0.0
    for load in loads:
        f, m = _load_resultant(load, x_ref)
        Fy += f
        M_ref += m
    return Fy, M_ref


def _residuals(loads: Sequence[Load], reactions: Sequence[Reaction]) -> Tuple[float, float]:
    """
    ΣFy y ΣM0 (respecto a x=0, horario+) con todas las acciones: debe dar ~0.
    """
    F_loads, M_loads = _sum_load_contributions(loads, 0.0)
    Fy = -F_loads
    M0 = M_loads
    for r in reactions:
        Fy += float(r.force)
        # fuerza hacia arriba en x>0 => giro antihorario
        M0 -= float(r.force) * float(r.position)
        if r.moment is not None:
            M0 += float(r.moment)
    return Fy, M0


def solve_equilibrium(beam: Beam, settings: AnalysisSettings = DEFAULT_SETTINGS) -> EquilibriumResult:
    """
    Resuelve reacciones por:
      ΣFy = 0
      ΣM  = 0  (respecto al empotramiento o al pin)

    Ménsula:
      R = ΣF (hacia arriba),  M_R = -ΣM_emp
    Simplemente apoyada:
      R_roller = ΣM_pin / (x_roller - x_pin),  R_pin = ΣF - R_roller

    La viga se valida primero (validate_beam): entradas inválidas lanzan
    InvalidGeometry / MalformedLoad / MalformedSupport sin calcular nada.
    """
    notes: List[str] = validate_beam(beam)
    pattern = classify_supports(beam.supports, ignore_redundant=settings.ignore_redundant_supports)

    if isinstance(pattern, Unsupported):
        raise UnsupportedConfiguration(f"Configuración de apoyos no soportada: {pattern.reason}.")

    for s in pattern.ignored:
        msg = f"Apoyo {s.kind} en x={s.position:g} ignorado (solo participa el primero de cada tipo)."
        notes.append(msg)
        logger.warning(msg)

    if isinstance(pattern, Cantilever):
        fx = pattern.fixed
        Fv, Mv = _sum_load_contributions(beam.loads, float(fx.position))
        reactions = [
            Reaction(kind=fx.kind, position=float(fx.position), force=Fv, moment=-Mv)
        ]
    else:
        pin, roller = pattern.pin, pattern.roller
        span = float(roller.position) - float(pin.position)
        if abs(span) < 1e-12:
            raise InvalidGeometry(
                f"Pin y rodillo coinciden en x={pin.position:g}: sistema de equilibrio singular."
            )
        total, M_pin = _sum_load_contributions(beam.loads, float(pin.position))
        R_roller = M_pin / span
        R_pin = total - R_roller
        if not (math.isfinite(R_roller) and math.isfinite(R_pin)):
            raise InvalidGeometry(
                f"Reacciones no finitas (pin x={pin.position:g}, rodillo x={roller.position:g})."
            )
        reactions = [
            Reaction(kind=pin.kind, position=float(pin.position), force=R_pin),
            Reaction(kind=roller.kind, position=float(roller.position), force=R_roller),
        ]

    res_Fy, res_M0 = _residuals(beam.loads, reactions)
    scale = max(1.0, sum(abs(r.force) for r in reactions))
    if abs(res_Fy) > settings.equilibrium_tol * scale or abs(res_M0) > settings.equilibrium_tol * scale * max(1.0, float(beam.length)):
        notes.append(f"ATENCIÓN: residuales de equilibrio ΣFy={res_Fy:g}, ΣM0={res_M0:g}.")
        logger.warning("Residuales de equilibrio fuera de tolerancia: ΣFy=%g ΣM0=%g", res_Fy, res_M0)

    logger.debug("Patrón %s, reacciones %s", pattern.name, reactions)

    return EquilibriumResult(
        pattern=pattern,
        reactions=reactions,
        residual_Fy=res_Fy,
        residual_M0=res_M0,
        notes=notes,
    )


def solve_reactions(beam: Beam, settings: AnalysisSettings = DEFAULT_SETTINGS) -> List[Reaction]:
    return solve_equilibrium(beam, settings).reactions
