# api/app.py
"""
FastAPI backend: expone el motor de beam_sfd como REST API.
El transporte solo traduce errores del motor a 400; nunca recalcula.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from beam_sfd.domain.errors import BeamAnalysisError
from beam_sfd.engine.analysis import calculate_sfd_bmd

logger = logging.getLogger(__name__)


app = FastAPI(
    title="beam_sfd API",
    description="Shear force / bending moment engine for statically determinate beams",
    version="1.0.0",
)

# CORS para el editor web
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Request/Response Models
# =============================================================================

# Campos sin tipar: la conversión numérica (y su error 400) es del motor.

class SupportData(BaseModel):
    """Apoyo tal cual lo envía el editor (la validación fina es del motor)."""
    type: Optional[Any] = None
    position: Optional[Any] = None


class LoadData(BaseModel):
    type: Optional[Any] = None
    magnitude: Optional[Any] = None
    position: Optional[Any] = None
    start: Optional[Any] = None
    end: Optional[Any] = None


class BeamData(BaseModel):
    length: Optional[Any] = Field(None, description="Beam length")
    supports: List[SupportData] = Field(default_factory=list)
    loads: List[LoadData] = Field(default_factory=list)


class ReactionData(BaseModel):
    type: str
    position: float
    value: float
    moment: Optional[float] = None


class AnalysisData(BaseModel):
    xArr: List[float]
    V: List[float]
    M: List[float]
    reactions: List[ReactionData]
    maxShear: float
    minShear: float
    maxMoment: float
    minMoment: float


def _payload(data: BeamData) -> Dict[str, Any]:
    # Campos ausentes => ausentes para el motor (MalformedLoad/MalformedSupport)
    return {
        "length": data.length,
        "supports": [s.model_dump(exclude_none=True) for s in data.supports],
        "loads": [l.model_dump(exclude_none=True) for l in data.loads],
    }


# =============================================================================
# API Endpoints
# =============================================================================

@app.get("/")
async def root():
    """Health check."""
    return {"status": "ok", "service": "beam_sfd API"}


@app.post("/api/calculate", response_model=AnalysisData, response_model_exclude_none=True)
def calculate(data: BeamData):
    """Reacciones + V(x), M(x) muestreados + extremos."""
    try:
        return calculate_sfd_bmd(_payload(data))
    except BeamAnalysisError as e:
        logger.warning("Solicitud rechazada (%s): %s", e.kind, e)
        raise HTTPException(status_code=400, detail=e.to_dict())


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
