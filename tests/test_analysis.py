import json
import logging

import pytest

from beam_sfd.domain.beam import Beam
from beam_sfd.domain.cases import Cantilever, SimplySupported
from beam_sfd.domain.errors import InvalidGeometry, MalformedLoad, UnsupportedConfiguration
from beam_sfd.domain.loads import DistUniform, PointForce
from beam_sfd.domain.supports import Support
from beam_sfd.engine.analysis import analyze_beam, calculate_sfd_bmd, result_to_payload
from beam_sfd.engine.settings import AnalysisSettings


SIMPLE = {
    "length": 10,
    "supports": [{"type": "pin", "position": 0}, {"type": "roller", "position": 10}],
    "loads": [{"type": "point", "magnitude": 10, "position": 5}],
}

CANTILEVER = {
    "length": 5,
    "supports": [{"type": "fixed", "position": 0}],
    "loads": [{"type": "point", "magnitude": 10, "position": 5}],
}


def test_payload_keys_and_values_simply_supported():
    out = calculate_sfd_bmd(SIMPLE)

    assert set(out) == {"xArr", "V", "M", "reactions", "maxShear", "minShear", "maxMoment", "minMoment"}
    assert len(out["xArr"]) == len(out["V"]) == len(out["M"]) == 501
    assert out["xArr"][0] == 0.0 and out["xArr"][-1] == 10.0

    pin, roller = out["reactions"]
    assert pin == {"type": "pin", "position": 0.0, "value": pytest.approx(5.0)}
    assert roller == {"type": "roller", "position": 10.0, "value": pytest.approx(5.0)}

    assert out["maxShear"] == pytest.approx(5.0)
    assert out["minShear"] == pytest.approx(-5.0)
    assert out["maxMoment"] == pytest.approx(25.0)
    assert out["minMoment"] == pytest.approx(0.0, abs=1e-9)


def test_payload_fixed_reaction_carries_moment():
    out = calculate_sfd_bmd(CANTILEVER)
    (r,) = out["reactions"]
    assert r["type"] == "fixed"
    assert r["value"] == pytest.approx(10.0)
    assert r["moment"] == pytest.approx(-50.0)
    assert out["minMoment"] == pytest.approx(-50.0)


def test_payload_is_json_serializable_and_deterministic():
    a = calculate_sfd_bmd(SIMPLE)
    b = calculate_sfd_bmd(SIMPLE)
    assert json.dumps(a) == json.dumps(b)
    assert all(isinstance(v, float) for v in a["M"])


def test_settings_change_resolution():
    out = calculate_sfd_bmd(SIMPLE, AnalysisSettings(divisions=100))
    assert len(out["xArr"]) == 101


@pytest.mark.parametrize("divisions,min_step", [(0, 0.01), (500, 0.0), (-5, 0.01)])
def test_invalid_settings_are_rejected(divisions, min_step):
    with pytest.raises(ValueError):
        AnalysisSettings(divisions=divisions, min_step=min_step)


def test_analyze_beam_attaches_pattern_and_residuals():
    beam = Beam(length=5.0, supports=[Support("fixed", 0.0)], loads=[PointForce(10.0, 5.0)])
    result = analyze_beam(beam)
    assert isinstance(result.pattern, Cantilever)
    assert result.residual_Fy == pytest.approx(0.0, abs=1e-9)
    assert result.residual_M0 == pytest.approx(0.0, abs=1e-9)
    assert result.notes == []


def test_analyze_beam_does_not_mutate_input():
    beam = Beam(length=10.0, supports=[Support("pin", 0.0), Support("roller", 10.0)],
                loads=[PointForce(10.0, 5.0)])
    before = repr(beam)
    analyze_beam(beam)
    assert repr(beam) == before


def test_ignored_redundant_supports_are_noted(caplog):
    beam = Beam(
        length=10.0,
        supports=[Support("pin", 0.0), Support("roller", 10.0), Support("pin", 5.0)],
        loads=[PointForce(10.0, 5.0)],
    )
    with pytest.raises(UnsupportedConfiguration):
        analyze_beam(beam)

    with caplog.at_level(logging.WARNING, logger="beam_sfd"):
        result = analyze_beam(beam, AnalysisSettings(ignore_redundant_supports=True))
    assert isinstance(result.pattern, SimplySupported)
    assert len(result.notes) == 1
    assert any("ignorado" in rec.getMessage() for rec in caplog.records)


def test_errors_propagate_with_kind():
    with pytest.raises(InvalidGeometry) as exc:
        calculate_sfd_bmd({**SIMPLE, "length": 0})
    assert exc.value.to_dict()["error"] == "InvalidGeometry"

    coincident = {**SIMPLE, "supports": [{"type": "pin", "position": 5}, {"type": "roller", "position": 5}]}
    with pytest.raises(InvalidGeometry):
        calculate_sfd_bmd(coincident)

    with pytest.raises(UnsupportedConfiguration):
        calculate_sfd_bmd({**SIMPLE, "supports": []})


def test_result_to_payload_omits_moment_for_pin_and_roller():
    beam = Beam(length=10.0, supports=[Support("pin", 0.0), Support("roller", 10.0)])
    out = result_to_payload(analyze_beam(beam))
    assert all("moment" not in r for r in out["reactions"])
    assert out["maxMoment"] == 0.0 and out["minMoment"] == 0.0


def test_load_at_right_end_closes_shear():
    beam = Beam(length=10.0, supports=[Support("pin", 0.0), Support("roller", 10.0)],
                loads=[PointForce(10.0, 10.0)])
    result = analyze_beam(beam)
    assert result.V[-1] == pytest.approx(0.0, abs=1e-9)
    assert result.M[-1] == pytest.approx(0.0, abs=1e-9)

    past_end = Beam(length=10.0, supports=beam.supports, loads=[PointForce(10.0, 10.0 + 5e-9)])
    with pytest.raises(MalformedLoad):
        analyze_beam(past_end)


def test_zero_length_load_note_is_reported_once():
    beam = Beam(length=10.0, supports=[Support("pin", 0.0), Support("roller", 10.0)],
                loads=[PointForce(10.0, 5.0), DistUniform(2.0, 4.0, 4.0)])
    result = analyze_beam(beam)
    assert len(result.notes) == 1
