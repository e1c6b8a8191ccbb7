from __future__ import annotations

from typing import Optional, Sequence, Tuple, List

import numpy as np
from matplotlib.patches import Circle, FancyArrowPatch, PathPatch, Polygon, Rectangle
from matplotlib.path import Path
from matplotlib.transforms import IdentityTransform

from beam_sfd.domain.beam import Beam
from beam_sfd.domain.labels import SUPPORT_FIXED, SUPPORT_PIN, reaction_label
from beam_sfd.domain.loads import DistTriangular, DistUniform, PointForce, PointMoment
from beam_sfd.domain.results import Reaction
from beam_sfd.view.style import RenderStyle


# -------------------------
# Helpers generales
# -------------------------
def _draw_arrow(ax, x: float, y0: float, y1: float, style: RenderStyle, color: str):
    ax.annotate(
        "",
        xy=(x, y1),
        xytext=(x, y0),
        arrowprops=dict(
            arrowstyle="-|>",
            lw=style.arrow_lw,
            mutation_scale=style.arrow_scale,
            color=color,
            facecolor=color,
            shrinkA=0,
            shrinkB=0,
        ),
    )


# -------------------------
# Momento circular (en pixeles)
# -------------------------
def _draw_moment_px(ax, x: float, M_cw: float, r_px: float, style: RenderStyle, color: str):
    """
    Arco de momento SIEMPRE circular (en pixeles), radio fijo r_px.
    M_cw >= 0 => flecha horaria.
    IMPORTANTE: llamar SOLO después de set_xlim/set_ylim.
    """
    cx, cy = ax.transData.transform((x, 0.0))

    theta1, theta2 = 30.0, 330.0
    n = 120
    ang = np.deg2rad(np.linspace(theta1, theta2, n))
    xs = cx + r_px * np.cos(ang)
    ys = cy + r_px * np.sin(ang)

    verts = np.column_stack([xs, ys])
    codes = np.full(n, Path.LINETO, dtype=int)
    codes[0] = Path.MOVETO
    path = Path(verts, codes)

    arc_patch = PathPatch(
        path,
        fill=False,
        lw=style.moment_arc_lw,
        edgecolor=color,
        transform=IdentityTransform(),
        zorder=10,
        clip_on=True,
    )
    arc_patch.set_clip_path(ax.patch)
    ax.add_patch(arc_patch)

    delta = float(style.moment_delta_deg)
    if M_cw >= 0:
        a0 = np.deg2rad(theta1 + delta)
        a1 = np.deg2rad(theta1)
    else:
        a0 = np.deg2rad(theta2 - delta)
        a1 = np.deg2rad(theta2)

    start = (cx + r_px * np.cos(a0), cy + r_px * np.sin(a0))
    end = (cx + r_px * np.cos(a1), cy + r_px * np.sin(a1))

    arrow = FancyArrowPatch(
        posA=start,
        posB=end,
        arrowstyle="-|>",
        mutation_scale=style.moment_arrow_scale,
        lw=style.moment_arrow_lw,
        color=color,
        shrinkA=0,
        shrinkB=0,
        transform=IdentityTransform(),
        zorder=11,
        clip_on=True,
    )
    arrow.set_clip_path(ax.patch)
    ax.add_patch(arrow)

    # label sugerido (pix->data)
    lx_pix = cx - 0.9 * r_px
    ly_pix = cy + 1.1 * r_px
    lx, ly = ax.transData.inverted().transform((lx_pix, ly_pix))
    return float(lx), float(ly)


# -------------------------
# Apoyos
# -------------------------
def _draw_support(ax, kind: str, x: float, L: float, size: float):
    if kind == SUPPORT_FIXED:
        # placa vertical en el extremo más cercano
        side = -1.0 if x <= 0.5 * L else 1.0
        w = 0.15 * size
        ax.add_patch(Rectangle(
            (x if side > 0 else x - w, -size), w, 2.0 * size,
            facecolor="lightgrey", edgecolor="black", hatch="///", linewidth=0.8, zorder=4,
        ))
        return
    if kind == SUPPORT_PIN:
        tri = Polygon(
            [[x, 0.0], [x - 0.5 * size, -size], [x + 0.5 * size, -size]],
            closed=True, facecolor="white", edgecolor="black", linewidth=0.9, zorder=4,
        )
        ax.add_patch(tri)
        return
    # rodillo
    r = 0.3 * size
    ax.add_patch(Circle((x, -r), r, facecolor="white", edgecolor="black", linewidth=0.9, zorder=4))
    ax.plot([x - 0.6 * size, x + 0.6 * size], [-2.0 * r, -2.0 * r], color="black", lw=0.9)


# -------------------------
# Cotas
# -------------------------
def _draw_dimension(ax, x0: float, x1: float, y: float, text: str, color: str = "blue"):
    if abs(x1 - x0) < 1e-9:
        return
    ax.annotate(
        "",
        xy=(x1, y),
        xytext=(x0, y),
        arrowprops=dict(arrowstyle="<->", lw=0.8, color=color, shrinkA=0, shrinkB=0),
    )
    ax.text(
        0.5 * (x0 + x1), y, text,
        ha="center", va="center", fontsize=8, color=color,
        bbox=dict(facecolor="white", edgecolor="none", pad=0.9), zorder=20,
    )


def _dimension_targets(beam: Beam) -> List[float]:
    xs: List[float] = [float(beam.length)]
    xs += [float(s.position) for s in beam.supports]
    for load in beam.loads:
        if isinstance(load, (PointForce, PointMoment)):
            xs.append(float(load.position))
        else:
            xs += [float(load.start), float(load.end)]
    return sorted(set(x for x in xs if abs(x) > 1e-9))


# -------------------------
# Render principal
# -------------------------
def render_fbd(
    ax,
    beam: Beam,
    reactions: Optional[Sequence[Reaction]] = None,
    style: Optional[RenderStyle] = None,
    xlim: Optional[Tuple[float, float]] = None,
):
    """
    Diagrama de cuerpo libre: viga, apoyos, cargas (arriba, down+) y,
    si se pasan, reacciones (abajo, up+).
    """
    style = style or RenderStyle()
    L = float(beam.length)
    fs = style.font_size
    lc = style.load_color
    rc = style.reaction_color

    ax.clear()

    arrow_h = (style.arrow_height_pctL / 100.0) * L
    dist_h = (style.dist_height_pctL / 100.0) * L
    sup_size = 0.04 * L

    # Viga
    ax.plot([0, L], [0, 0], linewidth=style.beam_lw, color=style.beam_color, zorder=3)

    for s in beam.supports:
        _draw_support(ax, s.kind, float(s.position), L, sup_size)

    moments_to_draw: List[Tuple[float, float, str, str]] = []

    for load in beam.loads:
        if isinstance(load, PointForce):
            x = float(load.position)
            _draw_arrow(ax, x, arrow_h, 0.0, style, lc)
            ax.text(x, arrow_h + 0.02 * L, f"{load.magnitude:g} {style.force_unit}",
                    ha="center", va="bottom", fontsize=fs, color=lc)

        elif isinstance(load, (DistUniform, DistTriangular)):
            x1, x2 = float(load.start), float(load.end)
            if x2 - x1 <= 0:
                continue
            if isinstance(load, DistUniform):
                patch = Rectangle((x1, 0.0), x2 - x1, dist_h)
                def h(xi):
                    return dist_h
            else:
                patch = Polygon([[x1, 0.0], [x2, 0.0], [x2, dist_h]], closed=True)
                def h(xi, x1=x1, x2=x2):
                    return dist_h * (xi - x1) / (x2 - x1)
            patch.set_facecolor(lc)
            patch.set_alpha(style.dist_rect_alpha)
            patch.set_edgecolor(lc)
            patch.set_linewidth(style.dist_rect_lw)
            ax.add_patch(patch)

            n_lines = max(3, int((x2 - x1) / (max(L, 1e-9) / 30.0)))
            for xi in np.linspace(x1, x2, n_lines):
                hi = h(float(xi))
                if hi > 1e-3 * dist_h:
                    _draw_arrow(ax, float(xi), hi, 0.0, style, lc)

            ax.text(
                (x1 + x2) / 2.0,
                dist_h + 0.03 * L,
                f"{load.magnitude:g} {style.intensity_unit}",
                ha="center", va="bottom", fontsize=fs, color=lc,
            )

        elif isinstance(load, PointMoment):
            # CCW+ => horario = -m
            moments_to_draw.append((float(load.position), -float(load.magnitude),
                                    f"{load.magnitude:g} {style.moment_unit}", lc))

    for idx, r in enumerate(reactions or []):
        x = float(r.position)
        y0 = -arrow_h if r.force >= 0 else -0.25 * arrow_h
        y1 = -0.25 * arrow_h if r.force >= 0 else -arrow_h
        _draw_arrow(ax, x, y0, y1, style, rc)
        ax.text(x, -arrow_h - 0.02 * L, f"{reaction_label(idx)}={r.force:.2f} {style.force_unit}",
                ha="center", va="top", fontsize=fs, color=rc)
        if r.moment is not None:
            moments_to_draw.append((x, float(r.moment), f"M={r.moment:.2f} {style.moment_unit}", rc))

    max_y = max(arrow_h, dist_h) * 1.9
    max_y = max(max_y, 0.3 * L)

    if xlim is None:
        margin = 0.08 * L
        ax.set_xlim(-margin, L + margin)
    else:
        ax.set_xlim(float(xlim[0]), float(xlim[1]))

    # Cotas desde x=0 (abajo)
    targets = _dimension_targets(beam)
    y_dim0 = -1.25 * max_y
    dy = 0.18 * max_y
    for i, x in enumerate(targets):
        _draw_dimension(ax, 0.0, x, y_dim0 - i * dy, f"{x:g}")

    bottom = y_dim0 - dy * max(0, len(targets) - 1) - 0.3 * max_y
    ax.set_ylim(bottom, max_y + 0.15 * L)
    ax.set_aspect("auto", adjustable="box")

    # Momentos (circular en px) - después de límites definitivos
    moment_r_px = float(max(14.0, 12.0 * float(style.moment_radius_pctL) / 8.0))
    for x, M_cw, text, color in moments_to_draw:
        lx, ly = _draw_moment_px(ax, x, M_cw, moment_r_px, style, color)
        ax.text(lx, ly, text, ha="left", va="bottom", fontsize=fs, color=color)

    ax.set_xlabel(f"x [{style.length_unit}]")
    ax.set_yticks([])
    ax.set_title("Diagrama de Cuerpo Libre (FBD)")
    ax.grid(True, axis="x", alpha=0.25)
