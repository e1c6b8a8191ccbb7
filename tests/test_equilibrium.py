import numpy as np
import pytest

from beam_sfd.domain.beam import Beam
from beam_sfd.domain.cases import Cantilever, SimplySupported, Unsupported
from beam_sfd.domain.errors import (
    InvalidGeometry, MalformedLoad, MalformedSupport, UnsupportedConfiguration
)
from beam_sfd.domain.loads import DistTriangular, DistUniform, PointForce, PointMoment
from beam_sfd.domain.supports import Support
from beam_sfd.engine.equilibrium import (
    _load_resultant, classify_supports, solve_equilibrium, solve_reactions
)
from beam_sfd.engine.settings import AnalysisSettings


def _ss(L=10.0, x_pin=0.0, x_roller=None, loads=()):
    x_roller = L if x_roller is None else x_roller
    return Beam(
        length=L,
        supports=[Support("pin", x_pin), Support("roller", x_roller)],
        loads=list(loads),
    )


def test_simply_supported_midspan_point_load():
    beam = _ss(loads=[PointForce(magnitude=10.0, position=5.0)])
    pin, roller = solve_reactions(beam)

    assert pin.kind == "pin" and roller.kind == "roller"
    assert pin.force == pytest.approx(5.0)
    assert roller.force == pytest.approx(5.0)
    assert pin.moment is None and roller.moment is None


def test_cantilever_tip_load():
    beam = Beam(length=5.0, supports=[Support("fixed", 0.0)], loads=[PointForce(10.0, 5.0)])
    (r,) = solve_reactions(beam)

    assert r.kind == "fixed"
    assert r.position == 0.0
    # fuerza hacia arriba (ΣR = ΣF) y momento antihorario
    assert r.force == pytest.approx(10.0)
    assert r.moment == pytest.approx(-50.0)


def test_cantilever_fixed_at_right_end_uses_arm_from_support():
    beam = Beam(length=4.0, supports=[Support("fixed", 4.0)], loads=[PointForce(5.0, 0.0)])
    (r,) = solve_reactions(beam)
    assert r.force == pytest.approx(5.0)
    assert r.moment == pytest.approx(20.0)


def test_coincident_pin_and_roller_is_invalid_geometry():
    beam = _ss(x_pin=5.0, x_roller=5.0, loads=[PointForce(10.0, 2.0)])
    with pytest.raises(InvalidGeometry):
        solve_reactions(beam)


def test_pin_not_at_origin_uses_relative_arm():
    beam = _ss(x_pin=2.0, x_roller=10.0, loads=[PointForce(12.0, 6.0)])
    pin, roller = solve_reactions(beam)
    assert roller.force == pytest.approx(6.0)
    assert pin.force == pytest.approx(6.0)


def test_overhang_gives_negative_pin_reaction():
    beam = _ss(x_roller=8.0, loads=[PointForce(10.0, 10.0)])
    pin, roller = solve_reactions(beam)
    assert roller.force == pytest.approx(12.5)
    assert pin.force == pytest.approx(-2.5)


def test_roller_left_of_pin():
    beam = Beam(
        length=10.0,
        supports=[Support("roller", 0.0), Support("pin", 10.0)],
        loads=[PointForce(10.0, 2.0)],
    )
    pin, roller = solve_reactions(beam)
    assert roller.position == 0.0
    assert roller.force == pytest.approx(8.0)
    assert pin.force == pytest.approx(2.0)


def test_partial_udl_reactions():
    beam = _ss(loads=[DistUniform(magnitude=3.0, start=2.0, end=4.0)])
    pin, roller = solve_reactions(beam)
    assert roller.force == pytest.approx(1.8)
    assert pin.force == pytest.approx(4.2)


def test_triangular_load_resultant_at_two_thirds():
    beam = _ss(L=6.0, loads=[DistTriangular(magnitude=6.0, start=0.0, end=6.0)])
    pin, roller = solve_reactions(beam)
    # resultante 18 en x=4
    assert roller.force == pytest.approx(12.0)
    assert pin.force == pytest.approx(6.0)


def test_applied_moment_only_produces_couple_of_reactions():
    beam = _ss(loads=[PointMoment(magnitude=10.0, position=5.0)])
    pin, roller = solve_reactions(beam)
    assert pin.force + roller.force == pytest.approx(0.0)
    assert roller.force == pytest.approx(-1.0)
    assert pin.force == pytest.approx(1.0)


@pytest.mark.parametrize(
    "beam",
    [
        _ss(loads=[PointForce(7.0, 1.5), DistUniform(2.0, 3.0, 9.0), PointMoment(4.0, 6.0)]),
        _ss(x_pin=1.0, x_roller=7.0, loads=[DistTriangular(5.0, 0.0, 10.0), PointForce(3.0, 9.5)]),
        Beam(length=3.0, supports=[Support("fixed", 0.0)],
             loads=[DistUniform(4.0, 0.0, 3.0), PointMoment(-2.0, 1.0), PointForce(1.0, 2.0)]),
        Beam(length=8.0, supports=[Support("fixed", 8.0)],
             loads=[DistTriangular(2.0, 2.0, 6.0), PointForce(6.0, 1.0)]),
    ],
)
def test_equilibrium_sum_of_reactions_matches_applied_loads(beam):
    res = solve_equilibrium(beam)
    applied = 0.0
    for load in beam.loads:
        if isinstance(load, PointForce):
            applied += load.magnitude
        elif isinstance(load, (DistUniform, DistTriangular)):
            applied += load.resultant

    assert sum(r.force for r in res.reactions) == pytest.approx(applied, abs=1e-6)
    assert np.isclose(res.residual_Fy, 0.0, atol=1e-9)
    assert np.isclose(res.residual_M0, 0.0, atol=1e-9)
    assert res.notes == []


def test_classify_supports_patterns():
    fixed = Support("fixed", 0.0)
    pin = Support("pin", 0.0)
    roller = Support("roller", 10.0)

    assert isinstance(classify_supports([fixed]), Cantilever)
    p = classify_supports([roller, pin])
    assert isinstance(p, SimplySupported)
    assert p.pin is pin and p.roller is roller

    assert isinstance(classify_supports([]), Unsupported)
    assert isinstance(classify_supports([roller, Support("roller", 5.0)]), Unsupported)
    assert isinstance(classify_supports([pin]), Unsupported)


def test_redundant_supports_rejected_unless_ignored():
    fixed = Support("fixed", 0.0)
    pin = Support("pin", 10.0)

    strict = classify_supports([fixed, pin])
    assert isinstance(strict, Unsupported)
    assert "redundantes" in strict.reason

    lenient = classify_supports([fixed, pin], ignore_redundant=True)
    assert isinstance(lenient, Cantilever)
    assert lenient.fixed is fixed
    assert lenient.ignored == (pin,)


def test_duplicate_identical_supports_count_as_redundant():
    pin = Support("pin", 0.0)
    roller = Support("roller", 10.0)
    assert isinstance(classify_supports([pin, roller, roller]), Unsupported)

    p = classify_supports([pin, roller, roller], ignore_redundant=True)
    assert isinstance(p, SimplySupported)
    assert p.ignored == (roller,)


def test_unsupported_configuration_raises_with_pattern_name():
    beam = Beam(length=10.0, supports=[Support("roller", 0.0), Support("roller", 10.0)],
                loads=[PointForce(10.0, 5.0)])
    with pytest.raises(UnsupportedConfiguration, match="roller@0"):
        solve_reactions(beam)


def test_ignored_supports_reported_in_notes():
    beam = Beam(
        length=10.0,
        supports=[Support("pin", 0.0), Support("roller", 10.0), Support("roller", 5.0)],
        loads=[PointForce(10.0, 5.0)],
    )
    res = solve_equilibrium(beam, AnalysisSettings(ignore_redundant_supports=True))
    assert [r.position for r in res.reactions] == [0.0, 10.0]
    assert len(res.notes) == 1
    assert "x=5" in res.notes[0]


@pytest.mark.parametrize(
    "beam,error",
    [
        (Beam(length=-5.0, supports=[Support("fixed", 0.0)], loads=[PointForce(10.0, 3.0)]), InvalidGeometry),
        (Beam(length=0.0, supports=[Support("fixed", 0.0)]), InvalidGeometry),
        (_ss(loads=[DistUniform(3.0, 8.0, 2.0)]), MalformedLoad),
        (Beam(length=5.0, supports=[Support("fixed", 0.0)], loads=[PointForce(float("nan"), 3.0)]), MalformedLoad),
        (_ss(loads=[PointForce(float("nan"), 3.0)]), MalformedLoad),
        (_ss(x_roller=12.0, loads=[PointForce(10.0, 5.0)]), MalformedSupport),
        (_ss(loads=[PointForce(10.0, 10.0 + 5e-9)]), MalformedLoad),
    ],
)
def test_solver_rejects_invalid_beams_before_computing(beam, error):
    with pytest.raises(error):
        solve_reactions(beam)


def test_solver_carries_validation_notes():
    beam = _ss(loads=[PointForce(10.0, 5.0), DistUniform(4.0, 3.0, 3.0)])
    res = solve_equilibrium(beam)
    assert len(res.notes) == 1
    assert "longitud nula" in res.notes[0]
    assert res.reactions[0].force == pytest.approx(5.0)


def test_unknown_load_type_is_malformed_load():
    with pytest.raises(MalformedLoad):
        _load_resultant(object(), 0.0)
