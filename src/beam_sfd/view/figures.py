from __future__ import annotations

import os
from typing import Dict, Optional

from matplotlib.figure import Figure

from beam_sfd.domain.beam import Beam
from beam_sfd.domain.results import AnalysisResult
from beam_sfd.view.renderer_fbd import render_fbd
from beam_sfd.view.renderer_vm import render_moment, render_shear
from beam_sfd.view.style import RenderStyle


def save_diagram_images(
    beam: Beam,
    result: AnalysisResult,
    out_dir: str,
    style: Optional[RenderStyle] = None,
    dpi: int = 150,
) -> Dict[str, str]:
    """
    Genera fbd.png, v.png y m.png en out_dir (sin pyplot: apto para servidor).
    Devuelve {"fbd": path, "v": path, "m": path} para el reporte PDF.
    """
    style = style or RenderStyle()
    os.makedirs(out_dir, exist_ok=True)

    renders = {
        "fbd": lambda ax: render_fbd(ax, beam, result.reactions, style=style),
        "v": lambda ax: render_shear(ax, result, style=style),
        "m": lambda ax: render_moment(ax, result, style=style),
    }

    out: Dict[str, str] = {}
    for key, render in renders.items():
        fig = Figure(figsize=(9.0, 3.6))
        ax = fig.add_subplot(111)
        render(ax)
        fig.tight_layout()
        path = os.path.join(out_dir, f"{key}.png")
        fig.savefig(path, dpi=dpi)
        out[key] = path
    return out
