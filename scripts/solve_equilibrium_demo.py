from beam_sfd.domain.beam import Beam
from beam_sfd.domain.loads import PointForce, DistUniform, PointMoment
from beam_sfd.domain.supports import Support
from beam_sfd.engine.equilibrium import solve_equilibrium


beam = Beam(
    length=10.0,
    supports=[
        Support(kind="pin", position=0.0),
        Support(kind="roller", position=8.0),   # voladizo de 2 m
    ],
    loads=[
        PointForce(magnitude=10.0, position=5.0),          # down+
        DistUniform(magnitude=3.0, start=2.0, end=4.0),    # down+
        PointMoment(magnitude=4.0, position=9.0),          # CCW+
    ],
)

res = solve_equilibrium(beam)
print("patrón =", res.pattern.name)
for r in res.reactions:
    print(f"{r.kind:>6} x={r.position:g}  R={r.force:.4f}")
print("residual Fy =", res.residual_Fy)
print("residual M0 =", res.residual_M0)
print("\n".join(res.notes))
