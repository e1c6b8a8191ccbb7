from __future__ import annotations
from dataclasses import dataclass
from typing import Union

from beam_sfd.domain.labels import LOAD_POINT, LOAD_UDL, LOAD_MOMENT, LOAD_TRIANGULAR


@dataclass(frozen=True)
class PointForce:
    magnitude: float   # down+
    position: float

    tag = LOAD_POINT


@dataclass(frozen=True)
class PointMoment:
    magnitude: float   # CCW+ (=> salto negativo en M(x))
    position: float

    tag = LOAD_MOMENT


@dataclass(frozen=True)
class DistUniform:
    magnitude: float   # fuerza/longitud, down+
    start: float
    end: float

    tag = LOAD_UDL

    @property
    def length(self) -> float:
        return float(self.end) - float(self.start)

    @property
    def resultant(self) -> float:
        return float(self.magnitude) * self.length

    @property
    def centroid(self) -> float:
        return 0.5 * (float(self.start) + float(self.end))


@dataclass(frozen=True)
class DistTriangular:
    """
    Carga linealmente variable: 0 en start, magnitude en end.
    Resultante = w*Lt/2 aplicada a 2/3 del tramo desde el extremo nulo.
    """
    magnitude: float   # intensidad pico, down+
    start: float
    end: float

    tag = LOAD_TRIANGULAR

    @property
    def length(self) -> float:
        return float(self.end) - float(self.start)

    @property
    def resultant(self) -> float:
        return 0.5 * float(self.magnitude) * self.length

    @property
    def centroid(self) -> float:
        return float(self.start) + (2.0 / 3.0) * self.length


Load = Union[PointForce, PointMoment, DistUniform, DistTriangular]
