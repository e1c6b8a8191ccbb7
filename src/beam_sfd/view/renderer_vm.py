from __future__ import annotations

from typing import Optional, Tuple, List, Set
import numpy as np

from beam_sfd.domain.results import AnalysisResult
from beam_sfd.view.style import RenderStyle


# -------------------------
# Helpers formato
# -------------------------
def _fmt_plain(v: float, decimals: int = 2) -> str:
    """Formato fijo (sin notación científica) y recorte de ceros."""
    s = f"{float(v):.{decimals}f}"
    if "." in s:
        s = s.rstrip("0").rstrip(".")
    if s == "-0":
        s = "0"
    return s


def _clamp(v: float, lo: float, hi: float) -> float:
    return float(min(max(v, lo), hi))


# -------------------------
# Extremos locales robustos
# -------------------------
def find_local_extrema_indices(y: np.ndarray, *, tol_slope: float) -> List[tuple[str, int]]:
    """
    Detecta extremos locales por cambios de signo en dy, IGNORANDO mesetas (dy≈0).
    Devuelve lista de ("max"/"min", idx_en_y).
    """
    n = len(y)
    if n < 5:
        return []

    dy = np.diff(y)
    s = np.zeros_like(dy, dtype=int)
    s[dy > +tol_slope] = +1
    s[dy < -tol_slope] = -1

    # Solo cambios entre pendientes no nulas
    nz = np.nonzero(s)[0]
    if nz.size < 2:
        return []

    s_nz = s[nz]
    out: List[tuple[str, int]] = []

    # + a - => máximo, - a + => mínimo; el extremo cae en nz[k-1] + 1
    for k in range(1, len(s_nz)):
        if s_nz[k - 1] > 0 and s_nz[k] < 0:
            out.append(("max", int(nz[k - 1] + 1)))
        elif s_nz[k - 1] < 0 and s_nz[k] > 0:
            out.append(("min", int(nz[k - 1] + 1)))

    return out


def _select_extrema_with_spacing(
    x: np.ndarray,
    y: np.ndarray,
    candidates: List[tuple[str, int]],
    *,
    y_abs_min: float,
    min_dx: float,
) -> List[tuple[str, int]]:
    """
    Filtra extremos con |y| chico y extremos demasiado cercanos en X.
    Prioriza por |y| descendente.
    """
    if not candidates:
        return []

    cand2 = [(k, i) for (k, i) in candidates if abs(float(y[i])) >= y_abs_min]
    if not cand2:
        return []

    cand2.sort(key=lambda ki: abs(float(y[ki[1]])), reverse=True)

    picked: List[tuple[str, int]] = []
    picked_x: List[float] = []

    for kind, i in cand2:
        xi = float(x[i])
        if all(abs(xi - xj) >= min_dx for xj in picked_x):
            picked.append((kind, i))
            picked_x.append(xi)

    picked.sort(key=lambda ki: float(x[ki[1]]))
    return picked


def moment_extrema(x: np.ndarray, M: np.ndarray, *, min_dx: Optional[float] = None) -> List[tuple[str, int]]:
    """
    Extremos de M(x) a etiquetar: locales + globales, sin spam en M≈0.
    """
    if len(x) == 0:
        return []

    max_abs = float(np.max(np.abs(M))) if len(M) else 0.0
    if max_abs <= 0.0:
        return []

    extrema = find_local_extrema_indices(M, tol_slope=1e-9 * max_abs)
    extrema.extend([("max", int(np.argmax(M))), ("min", int(np.argmin(M)))])

    seen: Set[int] = set()
    uniq: List[tuple[str, int]] = []
    for kind, i in extrema:
        if i in seen:
            continue
        seen.add(i)
        uniq.append((kind, i))

    if min_dx is None:
        min_dx = 0.03 * max(float(x[-1] - x[0]), 1e-9)

    return _select_extrema_with_spacing(
        x, M, uniq,
        y_abs_min=0.01 * max_abs,
        min_dx=min_dx,
    )


def _annotate_moment_extrema(ax, x: np.ndarray, M: np.ndarray, style: RenderStyle):
    """
    Marca máximos/mínimos y anota el valor.
    - Máximo: label arriba
    - Mínimo: label abajo
    - Reubica labels dentro del recuadro
    """
    x_min, x_max = ax.get_xlim()
    x_span = max(1e-9, float(x_max - x_min))

    picked = moment_extrema(x, M, min_dx=0.03 * x_span)
    if not picked:
        return

    y_min, y_max = ax.get_ylim()
    y_span = max(1e-9, float(y_max - y_min))
    mx = 0.03 * x_span
    my = 0.03 * y_span

    for kind, i in picked:
        xi = float(x[i])
        Mi = float(M[i])

        ax.scatter([xi], [Mi], s=18, zorder=6)

        if kind == "max":
            tx, ty = xi, Mi + my
            va = "bottom"
        else:
            tx, ty = xi, Mi - my
            va = "top"

        tx = _clamp(tx, x_min + mx, x_max - mx)
        ty = _clamp(ty, y_min + my, y_max - my)

        ax.text(
            tx, ty,
            f"{_fmt_plain(Mi, 2)} {style.moment_unit}",
            ha="center", va=va, fontsize=8, zorder=7
        )


def _symmetric_ylim(ax, y: np.ndarray, y_zoom: float):
    ymax = float(np.max(np.abs(y))) if len(y) else 0.0
    if ymax <= 0.0:
        ymax = 1.0
    pad = 1.15
    ax.set_ylim(-ymax * y_zoom * pad, ymax * y_zoom * pad)


# -------------------------
# Render
# -------------------------
def render_shear(
    ax,
    result: AnalysisResult,
    style: Optional[RenderStyle] = None,
    y_zoom: float = 1.0,
    xlim: Optional[Tuple[float, float]] = None,
):
    style = style or RenderStyle()
    ax.clear()
    x, V = result.x, result.V

    ax.plot(x, V, color="tab:red")
    ax.fill_between(x, V, 0.0, alpha=0.15, color="tab:red", step=None)
    ax.axhline(0.0, linewidth=1.0, color="black")

    if xlim is None:
        ax.set_xlim(float(x[0]), float(x[-1]))
    else:
        ax.set_xlim(xlim[0], xlim[1])
    _symmetric_ylim(ax, V, y_zoom)

    ax.set_ylabel(f"V [{style.force_unit}]")
    ax.set_title("Diagrama de Corte V(x)")
    ax.grid(True, alpha=0.25)


def render_moment(
    ax,
    result: AnalysisResult,
    style: Optional[RenderStyle] = None,
    y_zoom: float = 1.0,
    xlim: Optional[Tuple[float, float]] = None,
):
    style = style or RenderStyle()
    ax.clear()
    x, M = result.x, result.M

    ax.plot(x, M, color="tab:blue")
    ax.fill_between(x, M, 0.0, alpha=0.15, color="tab:blue")
    ax.axhline(0.0, linewidth=1.0, color="black")

    if xlim is None:
        ax.set_xlim(float(x[0]), float(x[-1]))
    else:
        ax.set_xlim(xlim[0], xlim[1])
    _symmetric_ylim(ax, M, y_zoom)

    _annotate_moment_extrema(ax, np.asarray(x, dtype=float), np.asarray(M, dtype=float), style)

    ax.set_ylabel(f"M [{style.moment_unit}]")
    ax.set_xlabel(f"x [{style.length_unit}]")
    ax.set_title("Diagrama de Momento Flector M(x)")
    ax.grid(True, alpha=0.25)
