from __future__ import annotations

import dataclasses
import logging
from typing import Any, Dict, Mapping, Optional

from beam_sfd.domain.beam import Beam
from beam_sfd.domain.errors import BeamAnalysisError
from beam_sfd.domain.results import AnalysisResult
from beam_sfd.engine.diagrams import sample_response
from beam_sfd.engine.equilibrium import solve_equilibrium
from beam_sfd.engine.normalize import beam_from_payload
from beam_sfd.engine.settings import AnalysisSettings, DEFAULT_SETTINGS

logger = logging.getLogger(__name__)


def analyze_beam(beam: Beam, settings: Optional[AnalysisSettings] = None) -> AnalysisResult:
    """
    validar -> reacciones -> muestreo V/M.
    Función pura: no cachea ni modifica la viga.
    """
    settings = settings or DEFAULT_SETTINGS
    try:
        eq = solve_equilibrium(beam, settings)
    except BeamAnalysisError as e:
        logger.warning("Análisis rechazado (%s): %s", e.kind, e)
        raise

    result = sample_response(beam, eq.reactions, settings)
    logger.info(
        "Viga L=%g analizada (%s): %d muestras, V[%g, %g], M[%g, %g]",
        float(beam.length), eq.pattern.name, len(result.x),
        result.min_shear, result.max_shear, result.min_moment, result.max_moment,
    )

    return dataclasses.replace(
        result,
        pattern=eq.pattern,
        residual_Fy=eq.residual_Fy,
        residual_M0=eq.residual_M0,
        notes=list(eq.notes),
    )


def result_to_payload(result: AnalysisResult) -> Dict[str, Any]:
    """
    Salida estable para el renderer:
      {xArr, V, M, reactions: [{type, position, value, moment?}], maxShear, minShear, maxMoment, minMoment}
    """
    reactions = []
    for r in result.reactions:
        item: Dict[str, Any] = {"type": r.kind, "position": float(r.position), "value": float(r.force)}
        if r.moment is not None:
            item["moment"] = float(r.moment)
        reactions.append(item)

    return {
        "xArr": [float(v) for v in result.x],
        "V": [float(v) for v in result.V],
        "M": [float(v) for v in result.M],
        "reactions": reactions,
        "maxShear": float(result.max_shear),
        "minShear": float(result.min_shear),
        "maxMoment": float(result.max_moment),
        "minMoment": float(result.min_moment),
    }


def calculate_sfd_bmd(payload: Mapping[str, Any], settings: Optional[AnalysisSettings] = None) -> Dict[str, Any]:
    """Payload del editor -> payload del renderer. Errores: BeamAnalysisError."""
    beam = beam_from_payload(payload)
    return result_to_payload(analyze_beam(beam, settings))
