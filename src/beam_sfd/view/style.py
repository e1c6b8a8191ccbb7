from __future__ import annotations
from dataclasses import dataclass

@dataclass(frozen=True)
class RenderStyle:
    beam_lw: float = 2

    arrow_lw: float = 1.0
    arrow_scale: float = 11.0

    dist_rect_lw: float = 0.9
    dist_rect_alpha: float = 0.12

    moment_arc_lw: float = 1.0
    moment_arrow_lw: float = 1.0
    moment_arrow_scale: float = 11.0

    # Alturas relativas a L
    arrow_height_pctL: float = 12.0
    dist_height_pctL: float = 8.0
    moment_radius_pctL: float = 8.0

    moment_delta_deg: float = 18.0
    font_size: int = 9

    load_color: str = "red"
    reaction_color: str = "green"
    beam_color: str = "blue"

    # Unidades para etiquetas (el motor no las usa)
    force_unit: str = "kN"
    length_unit: str = "m"

    @property
    def moment_unit(self) -> str:
        return f"{self.force_unit}·{self.length_unit}"

    @property
    def intensity_unit(self) -> str:
        return f"{self.force_unit}/{self.length_unit}"
