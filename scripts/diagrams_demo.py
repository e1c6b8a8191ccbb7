import os
import tempfile

from beam_sfd.domain.beam import Beam
from beam_sfd.domain.loads import PointForce, DistTriangular
from beam_sfd.domain.supports import Support
from beam_sfd.engine.analysis import analyze_beam
from beam_sfd.services.calc_report_pdf import ReportHeader, export_calc_report_pdf
from beam_sfd.view.figures import save_diagram_images

beam = Beam(
    length=5.0,
    supports=[Support(kind="fixed", position=0.0)],
    loads=[
        PointForce(magnitude=10.0, position=5.0),
        DistTriangular(magnitude=4.0, start=1.0, end=5.0),
    ],
)

res = analyze_beam(beam)
print("V(0) =", res.V[0])
print("M(0) =", res.M[0])
print("V(L) =", res.V[-1])
print("M(L) =", res.M[-1])
print("M ∈ [", res.min_moment, ",", res.max_moment, "]")

out_dir = os.path.join(tempfile.gettempdir(), "beam_sfd_demo")
imgs = save_diagram_images(beam, res, out_dir)
pdf = os.path.join(out_dir, "memoria.pdf")
export_calc_report_pdf(pdf, ReportHeader(titulo="Demo ménsula"), beam, res, imagenes=imgs)
print("PDF:", pdf)
