from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from beam_sfd.domain.beam import Beam
from beam_sfd.domain.loads import DistTriangular, DistUniform, PointForce, PointMoment
from beam_sfd.domain.results import AnalysisResult, Reaction
from beam_sfd.engine.normalize import validate_beam
from beam_sfd.engine.settings import AnalysisSettings, DEFAULT_SETTINGS


@dataclass(frozen=True)
class VMDiagram:
    """
    Diagrama V(x) y M(x) basado en superposición (de izquierda a derecha:
    solo aportan las acciones con posición <= x).

    Convención interna:
    - Fuerzas + arriba (reacciones +R, cargas -P)
    - Distribuidas w_up + arriba (cargas del usuario down+ => w_up = -q)
    - Pares pm_M horario+ => salto + en M(x)
      (reacción de empotramiento tal cual, momento aplicado CCW+ => -m)
    """
    length: float

    pf_x: np.ndarray          # posiciones
    pf_Fy: np.ndarray         # Fy up+

    dl_a: np.ndarray          # inicio
    dl_b: np.ndarray          # fin
    dl_w: np.ndarray          # w_up

    tl_a: np.ndarray          # triangular: extremo nulo
    tl_b: np.ndarray          # triangular: extremo pico
    tl_w: np.ndarray          # w_up pico

    pm_x: np.ndarray
    pm_M: np.ndarray

    def eval_V(self, x: float) -> float:
        return float(self._eval_V_array(np.asarray([x], dtype=float))[0])

    def eval_M(self, x: float) -> float:
        return float(self._eval_M_array(np.asarray([x], dtype=float))[0])

    # -------------------------
    # Evaluadores vectorizados
    # -------------------------
    def _eval_V_array(self, x: np.ndarray) -> np.ndarray:
        V = np.zeros_like(x, dtype=float)
        xcol = x[:, None]

        # puntuales: V += Fy * H(x-xi)
        if self.pf_x.size:
            H = (xcol >= self.pf_x[None, :]).astype(float)
            V += H @ self.pf_Fy

        # uniformes: V += w * clip(x-a, 0, b-a)
        if self.dl_a.size:
            a = self.dl_a[None, :]
            t = np.clip(xcol - a, 0.0, self.dl_b[None, :] - a)
            V += np.sum(self.dl_w[None, :] * t, axis=1)

        # triangulares: intensidad w*t/Lt => V += w*t^2/(2Lt)
        if self.tl_a.size:
            a = self.tl_a[None, :]
            Lt = self.tl_b[None, :] - a
            t = np.clip(xcol - a, 0.0, Lt)
            V += np.sum(self.tl_w[None, :] * t * t / (2.0 * Lt), axis=1)

        return V

    def _eval_M_array(self, x: np.ndarray) -> np.ndarray:
        M = np.zeros_like(x, dtype=float)
        xcol = x[:, None]

        # puntuales: M += Fy*(x-xi)*H(x-xi)
        if self.pf_x.size:
            dx = xcol - self.pf_x[None, :]
            H = (dx >= 0.0).astype(float)
            M += np.sum(self.pf_Fy[None, :] * dx * H, axis=1)

        # uniformes: porción cubierta t = min(x,b)-a, resultante w*t en a+t/2
        # - x<a: t=0
        # - a<=x<=b: w*(x-a)^2/2
        # - x>b: w*(b-a)*(x - (a+b)/2)
        if self.dl_a.size:
            a = self.dl_a[None, :]
            t = np.clip(xcol - a, 0.0, self.dl_b[None, :] - a)
            M += np.sum(self.dl_w[None, :] * t * (xcol - (a + 0.5 * t)), axis=1)

        # triangulares:
        # - a<=x<b: w*t^3/(6Lt)
        # - x>=b: (w*Lt/2)*(x - (a + 2Lt/3))
        if self.tl_a.size:
            a = self.tl_a[None, :]
            b = self.tl_b[None, :]
            w = self.tl_w[None, :]
            Lt = b - a
            t = np.clip(xcol - a, 0.0, Lt)
            partial = w * t ** 3 / (6.0 * Lt)
            full = 0.5 * w * Lt * (xcol - (a + (2.0 / 3.0) * Lt))
            M += np.sum(np.where(xcol < b, partial, full), axis=1)

        # pares: M += M0 * H(x-xk)
        if self.pm_x.size:
            Hm = (xcol >= self.pm_x[None, :]).astype(float)
            M += Hm @ self.pm_M

        return M


def build_V_M(beam: Beam, reactions: Sequence[Reaction]) -> VMDiagram:
    """
    Arma el diagrama juntando reacciones y cargas en la convención interna.
    Distribuidas de longitud nula se descartan (no aportan).
    """
    pf_x, pf_Fy = [], []
    pm_x, pm_M = [], []
    dl_a, dl_b, dl_w = [], [], []
    tl_a, tl_b, tl_w = [], [], []

    for r in reactions:
        pf_x.append(float(r.position))
        pf_Fy.append(float(r.force))
        if r.moment is not None:
            pm_x.append(float(r.position))
            pm_M.append(float(r.moment))

    for load in beam.loads:
        if isinstance(load, PointForce):
            pf_x.append(float(load.position))
            pf_Fy.append(-float(load.magnitude))
        elif isinstance(load, PointMoment):
            pm_x.append(float(load.position))
            pm_M.append(-float(load.magnitude))
        elif isinstance(load, DistUniform):
            if load.length <= 0:
                continue
            dl_a.append(float(load.start))
            dl_b.append(float(load.end))
            dl_w.append(-float(load.magnitude))
        elif isinstance(load, DistTriangular):
            if load.length <= 0:
                continue
            tl_a.append(float(load.start))
            tl_b.append(float(load.end))
            tl_w.append(-float(load.magnitude))

    def arr(v):
        return np.array(v, dtype=float)

    return VMDiagram(
        length=float(beam.length),
        pf_x=arr(pf_x), pf_Fy=arr(pf_Fy),
        dl_a=arr(dl_a), dl_b=arr(dl_b), dl_w=arr(dl_w),
        tl_a=arr(tl_a), tl_b=arr(tl_b), tl_w=arr(tl_w),
        pm_x=arr(pm_x), pm_M=arr(pm_M),
    )


def sample_grid(length: float, settings: AnalysisSettings = DEFAULT_SETTINGS) -> np.ndarray:
    """
    x = 0, paso, 2*paso, ... <= L, redondeado a `decimals`.
    paso = max(min_step, L/divisions). El último punto es exactamente L.
    """
    L = float(length)
    step = max(float(settings.min_step), L / int(settings.divisions))
    n = int(np.floor(L / step + 1e-9))
    x = np.round(np.arange(n + 1, dtype=float) * step, int(settings.decimals))
    x = x[x < L]
    return np.append(x, L)


def sample_response(
    beam: Beam,
    reactions: Sequence[Reaction],
    settings: Optional[AnalysisSettings] = None,
) -> AnalysisResult:
    settings = settings or DEFAULT_SETTINGS
    notes = validate_beam(beam)

    diag = build_V_M(beam, reactions)
    x = sample_grid(beam.length, settings)
    V = diag._eval_V_array(x)
    M = diag._eval_M_array(x)

    return AnalysisResult(
        x=x,
        V=V,
        M=M,
        reactions=list(reactions),
        max_shear=float(np.max(V)),
        min_shear=float(np.min(V)),
        max_moment=float(np.max(M)),
        min_moment=float(np.min(M)),
        notes=notes,
    )
