# path: src/beam_sfd/services/calc_report_pdf.py
from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional

import numpy as np
from reportlab.lib import colors, pagesizes
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Image, PageBreak, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from beam_sfd.domain.beam import Beam
from beam_sfd.domain.cases import Cantilever, SimplySupported
from beam_sfd.domain.labels import LOAD_DISPLAY, SUPPORT_DISPLAY, reaction_label
from beam_sfd.domain.loads import DistTriangular, DistUniform, Load, PointForce, PointMoment
from beam_sfd.domain.results import AnalysisResult, ResponseSample
from beam_sfd.view.style import RenderStyle

# Nota: este módulo NO genera figuras. Acepta paths a imágenes ya generadas
# (FBD, V, M; ver view/figures.py) y el resultado del motor.


@dataclass(frozen=True)
class ReportHeader:
    titulo: str = "Detailed Engineering Calculations"
    cliente_proyecto: str = ""
    autor: str = ""
    fecha: Optional[datetime] = None
    revision: str = "A"


def sample_points(result: AnalysisResult, n_points: int = 10) -> List[ResponseSample]:
    """
    ~n_points muestras equiespaciadas en índice, incluyendo siempre la última.
    """
    n = len(result.x)
    if n == 0:
        return []
    step = max(1, n // max(1, int(n_points)))
    idx = list(range(0, n, step))
    if idx[-1] != n - 1:
        idx.append(n - 1)
    return [
        ResponseSample(x=float(result.x[i]), shear=float(result.V[i]), moment=float(result.M[i]))
        for i in idx
    ]


def load_description(load: Load, style: Optional[RenderStyle] = None) -> str:
    style = style or RenderStyle()
    fu, lu = style.force_unit, style.length_unit
    if isinstance(load, PointForce):
        return f"Point load of {load.magnitude:g} {fu} at position {load.position:g} {lu}"
    if isinstance(load, PointMoment):
        return f"Applied moment of {load.magnitude:g} {style.moment_unit} at position {load.position:g} {lu}"
    if isinstance(load, DistUniform):
        return (
            f"UDL of {load.magnitude:g} {style.intensity_unit} over {load.length:g} {lu} "
            f"(total = {_f(load.resultant, 3)} {fu}) from {load.start:g} {lu} to {load.end:g} {lu}"
        )
    if isinstance(load, DistTriangular):
        return (
            f"UVL rising from 0 to {load.magnitude:g} {style.intensity_unit} over {load.length:g} {lu} "
            f"(total = {_f(load.resultant, 3)} {fu} at x = {_f(load.centroid, 3)} {lu})"
        )
    return repr(load)


def export_calc_report_pdf(
    out_pdf_path: str,
    header: ReportHeader,
    beam: Beam,
    result: AnalysisResult,
    imagenes: Optional[Dict[str, str]] = None,
    style: Optional[RenderStyle] = None,
    n_table_points: int = 10,
    page_size=pagesizes.A4,
) -> None:
    """
    Genera la memoria "paso a paso" en PDF (A4): equilibrio, reacciones,
    cargas, tabla de V/M muestreada, extremos, metodología y figuras.
    """
    style = style or RenderStyle()
    fu, lu, mu = style.force_unit, style.length_unit, style.moment_unit
    imgs = _normalize_images_dict(imagenes)

    styles = getSampleStyleSheet()
    styles.add(ParagraphStyle(name="H1c", parent=styles["Heading1"], alignment=TA_CENTER))
    styles.add(ParagraphStyle(name="Small", parent=styles["BodyText"], fontSize=9, leading=11))
    styles.add(ParagraphStyle(name="MonoSmall", parent=styles["BodyText"], fontName="Courier", fontSize=8, leading=10))

    doc = SimpleDocTemplate(
        out_pdf_path,
        pagesize=page_size,
        leftMargin=15 * mm,
        rightMargin=15 * mm,
        topMargin=12 * mm,
        bottomMargin=12 * mm,
        title=header.titulo,
    )

    story: List[object] = []

    # ----------------- Portada -----------------
    story.append(Paragraph(header.titulo, styles["H1c"]))
    story.append(Spacer(1, 4 * mm))

    fecha = header.fecha or datetime.now()
    meta_rows = [
        ["Project / Client:", header.cliente_proyecto or "-"],
        ["Author:", header.autor or "-"],
        ["Date:", fecha.strftime("%Y-%m-%d %H:%M")],
        ["Revision:", header.revision],
        ["Beam:", f"L = {beam.length:g} {lu}, {_pattern_text(result)}"],
    ]
    t = Table(meta_rows, colWidths=[40 * mm, 140 * mm])
    t.setStyle(_kv_table_style())
    story.append(t)
    story.append(Spacer(1, 6 * mm))

    # ----------------- Equilibrio -----------------
    story.append(Paragraph("Equilibrium Equations", styles["Heading2"]))
    story.extend(_bullets([
        "ΣFy = 0 (vertical forces): the sum of all support reactions equals the sum of all vertical loads.",
        "ΣM = 0 (moments): the sum of moments about any point equals zero.",
    ], styles))
    story.append(Spacer(1, 2 * mm))
    story.extend(_mono_block(_equations(result), styles))
    story.append(Spacer(1, 4 * mm))

    # ----------------- Reacciones -----------------
    story.append(Paragraph("Support Reactions", styles["Heading2"]))
    rrows = [["Reaction", "Support", f"x [{lu}]", f"R [{fu}]", f"M [{mu}]"]]
    for i, r in enumerate(result.reactions):
        rrows.append([
            reaction_label(i),
            SUPPORT_DISPLAY.get(r.kind, r.kind),
            _f(r.position, 3),
            _f(r.force, 3),
            "-" if r.moment is None else _f(r.moment, 3),
        ])
    t = Table(rrows, colWidths=[25 * mm, 35 * mm, 35 * mm, 40 * mm, 45 * mm])
    t.setStyle(_grid_table_style(header_rows=1))
    story.append(t)
    story.append(Spacer(1, 2 * mm))

    story.append(Paragraph("Reaction calculation steps", styles["Heading3"]))
    total_load = float(sum(r.force for r in result.reactions))
    steps = [f"1. Total vertical load: ΣFy = {_f(total_load, 3)} {fu}"]
    if isinstance(result.pattern, Cantilever):
        steps += [
            "2. Take moments about the fixed support",
            "3. Fixed reaction balances the whole load and its moment",
        ]
    else:
        steps += [
            "2. Take moments about the pin support (A) to find the roller reaction (B)",
            "3. Use ΣFy = 0 to find the pin reaction: R_A = Total Load - R_B",
        ]
    story.extend(_mono_block(steps, styles))
    story.append(Spacer(1, 2 * mm))

    res_rows = [
        ["Residual ΣFy", _f(result.residual_Fy, 9)],
        ["Residual ΣM0", _f(result.residual_M0, 9)],
    ]
    t = Table(res_rows, colWidths=[60 * mm, 120 * mm])
    t.setStyle(_kv_table_style())
    story.append(t)
    story.append(Spacer(1, 4 * mm))

    # ----------------- Cargas -----------------
    story.append(Paragraph("Applied Loads", styles["Heading2"]))
    if beam.loads:
        crows = [["Load", "Detail"]]
        for load in beam.loads:
            crows.append([LOAD_DISPLAY.get(load.tag, load.tag), Paragraph(load_description(load, style), styles["Small"])])
        t = Table(crows, colWidths=[30 * mm, 150 * mm])
        t.setStyle(_grid_table_style(header_rows=1))
        story.append(t)
    else:
        story.append(Paragraph("No loads applied to the beam", styles["Small"]))
    story.append(Spacer(1, 4 * mm))

    story.append(PageBreak())

    # ----------------- Muestras -----------------
    story.append(Paragraph("Sample Calculations", styles["Heading2"]))
    srows = [[f"Position [{lu}]", f"Shear Force [{fu}]", f"Bending Moment [{mu}]"]]
    for p in sample_points(result, n_table_points):
        srows.append([_f(p.x, 2), _f(p.shear, 2), _f(p.moment, 2)])
    t = Table(srows, colWidths=[50 * mm, 65 * mm, 65 * mm], repeatRows=1)
    t.setStyle(_grid_table_style(header_rows=1))
    story.append(t)
    story.append(Spacer(1, 3 * mm))

    story.append(Paragraph("Extreme values", styles["Heading3"]))
    erows = [["", "Value", f"x [{lu}]"]]
    erows.append([f"max V [{fu}]", _f(result.max_shear, 3), _f(result.x[int(np.argmax(result.V))], 3)])
    erows.append([f"min V [{fu}]", _f(result.min_shear, 3), _f(result.x[int(np.argmin(result.V))], 3)])
    erows.append([f"max M [{mu}]", _f(result.max_moment, 3), _f(result.x[int(np.argmax(result.M))], 3)])
    erows.append([f"min M [{mu}]", _f(result.min_moment, 3), _f(result.x[int(np.argmin(result.M))], 3)])
    t = Table(erows, colWidths=[50 * mm, 65 * mm, 65 * mm])
    t.setStyle(_grid_table_style(header_rows=1))
    story.append(t)
    story.append(Spacer(1, 4 * mm))

    # ----------------- Metodología -----------------
    story.append(Paragraph("Calculation Methodology", styles["Heading2"]))
    story.extend(_mono_block([
        "V(x) = Σ(Reactions to the left of x) - Σ(Loads to the left of x)",
        "M(x) = Σ(Reactions × moment arms) - Σ(Loads × moment arms) - Σ(Applied moments)",
        "UDL: equivalent point load = intensity × length, acting at the centroid",
        "UVL: equivalent point load = peak × length / 2, acting at 2/3 from the zero end",
    ], styles))
    story.append(Spacer(1, 3 * mm))

    if result.notes:
        story.append(Paragraph("Notes", styles["Heading3"]))
        story.extend(_bullets(list(result.notes), styles))

    # ----------------- Figuras -----------------
    story.append(PageBreak())
    story.append(Paragraph("Figures", styles["Heading2"]))

    _append_figure(story, styles, "fbd", "Free body diagram (FBD)", imgs, max_w=180 * mm, max_h=80 * mm)
    _append_figure(story, styles, "v", "Shear force diagram V(x)", imgs, max_w=180 * mm, max_h=80 * mm)
    _append_figure(story, styles, "m", "Bending moment diagram M(x)", imgs, max_w=180 * mm, max_h=80 * mm)

    doc.build(story)


# ----------------- helpers -----------------

def _pattern_text(result: AnalysisResult) -> str:
    if isinstance(result.pattern, Cantilever):
        return f"cantilever (fixed at x = {result.pattern.fixed.position:g})"
    if isinstance(result.pattern, SimplySupported):
        return (
            f"simply supported (pin at x = {result.pattern.pin.position:g}, "
            f"roller at x = {result.pattern.roller.position:g})"
        )
    return "-"


def _equations(result: AnalysisResult) -> List[str]:
    if isinstance(result.pattern, Cantilever):
        return [
            "ΣFy = 0  ⇒  R - ΣF = 0  ⇒  R = ΣF",
            "ΣM_fixed = 0  ⇒  M_R + Σ F·(x - x_fixed) - Σ m = 0",
        ]
    return [
        "ΣFy = 0  ⇒  R_A + R_B = Σ(All Vertical Loads)",
        "ΣM_A = 0  ⇒  R_B·(x_B - x_A) = Σ F·(x - x_A) - Σ m",
        "⇒ R_A = ΣF - R_B",
    ]


def _normalize_images_dict(imagenes: Optional[Dict[str, str]]) -> Dict[str, str]:
    if not imagenes:
        return {}
    out: Dict[str, str] = {}
    for k, v in imagenes.items():
        kk = (k or "").strip().lower()
        vv = (v or "").strip()
        if not kk or not vv:
            continue
        out[kk] = vv
    # alias comunes
    for alias in ("fbd", "v", "m"):
        if f"{alias}.png" in out and alias not in out:
            out[alias] = out[f"{alias}.png"]
    return out


def _append_figure(story: List[object], styles, key: str, title: str, imgs: Dict[str, str], *, max_w: float, max_h: float):
    story.append(Paragraph(title, styles["Heading3"]))
    path = (imgs.get(key) or "").strip()
    if path and os.path.exists(path):
        story.append(_img(path, max_w=max_w, max_h=max_h))
    else:
        # Dejar evidencia en el PDF si no se insertó la imagen
        story.append(Paragraph(f"(No image: '{key}' not available)", styles["Small"]))
    story.append(Spacer(1, 3 * mm))


def _f(v: float, dec: int) -> str:
    s = f"{float(v):.{dec}f}"
    if "." in s:
        s = s.rstrip("0").rstrip(".")
    if s == "-0":
        s = "0"
    return s


def _bullets(items: List[str], styles):
    out: List[object] = []
    for it in items:
        out.append(Paragraph(f"• {it}", styles["BodyText"]))
        out.append(Spacer(1, 1.2 * mm))
    return out


def _mono_block(lines: List[str], styles):
    out: List[object] = []
    for ln in lines:
        out.append(Paragraph(ln.replace(" ", "&nbsp;"), styles["MonoSmall"]))
    return out


def _kv_table_style():
    return TableStyle(
        [
            ("FONTNAME", (0, 0), (-1, -1), "Helvetica"),
            ("FONTSIZE", (0, 0), (-1, -1), 10),
            ("GRID", (0, 0), (-1, -1), 0.5, colors.black),
            ("BACKGROUND", (0, 0), (0, -1), colors.whitesmoke),
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ("LEFTPADDING", (0, 0), (-1, -1), 6),
            ("RIGHTPADDING", (0, 0), (-1, -1), 6),
            ("TOPPADDING", (0, 0), (-1, -1), 4),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
        ]
    )


def _grid_table_style(header_rows: int = 1, font_size: int = 9):
    ts = [
        ("FONTNAME", (0, 0), (-1, -1), "Helvetica"),
        ("FONTSIZE", (0, 0), (-1, -1), font_size),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.black),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("LEFTPADDING", (0, 0), (-1, -1), 4),
        ("RIGHTPADDING", (0, 0), (-1, -1), 4),
        ("TOPPADDING", (0, 0), (-1, -1), 3),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
    ]
    if header_rows > 0:
        ts += [
            ("BACKGROUND", (0, 0), (-1, header_rows - 1), colors.lightgrey),
            ("FONTNAME", (0, 0), (-1, header_rows - 1), "Helvetica-Bold"),
        ]
    return TableStyle(ts)


def _img(path: str, *, max_w: float, max_h: float):
    img = Image(path)
    iw, ih = img.imageWidth, img.imageHeight
    if iw <= 0 or ih <= 0:
        return img
    scale = min(max_w / iw, max_h / ih, 1.0)
    img.drawWidth = iw * scale
    img.drawHeight = ih * scale
    return img
