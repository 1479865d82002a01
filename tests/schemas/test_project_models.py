# File: tests/schemas/test_project_models.py
"""Tests for project payload validation."""

import pytest
from pydantic import ValidationError

from fence_layout.core.fence_types import GateType, ReturnDirection
from fence_layout.schemas.project_models import GateModel, PointModel, ProjectModel


def _line(line_id, a, b, length_mm, **extra):
    data = {
        "id": line_id,
        "a": {"x": a[0], "y": a[1]},
        "b": {"x": b[0], "y": b[1]},
        "length_mm": length_mm,
    }
    data.update(extra)
    return data


@pytest.fixture
def client_payload():
    """A project as saved by the drawing client (camelCase keys)."""
    return {
        "lines": [
            _line("run_1", (0, 0), (5000, 0), 5000),
            _line("run_2", (5000, 0), (5000, 4800), 4800, gateId="gate_1"),
        ],
        "gates": [
            {
                "id": "gate_1",
                "type": "sliding-4800",
                "runId": "run_2",
                "slidingReturnDirection": "right",
                "returnLength_mm": 4500,
                "widthRange": "4.0/5.0",
            }
        ],
        "leftovers": [{"id": "old", "length_mm": 1200}],
    }


class TestProjectModel:

    def test_client_payload(self, client_payload):
        project = ProjectModel.model_validate(client_payload)
        lines, gates, pool = project.to_domain()

        assert [l.id for l in lines] == ["run_1", "run_2"]
        assert lines[1].gate_id == "gate_1"
        assert gates[0].type is GateType.SLIDING_4800
        assert gates[0].sliding_return_direction is ReturnDirection.RIGHT
        assert gates[0].return_length_mm == 4500
        assert gates[0].width_range == "4.0/5.0"
        assert [l.id for l in pool.available()] == ["old"]
        assert pool.next_id() == "leftover_2"

    def test_snake_case_accepted(self):
        project = ProjectModel.model_validate({
            "lines": [_line("r", (0, 0), (900, 0), 900, gate_id="g")],
            "gates": [{"id": "g", "type": "single_900", "run_id": "r"}],
        })
        assert project.gates[0].run_id == "r"

    def test_locked_90_derived_from_direction(self):
        project = ProjectModel.model_validate({
            "lines": [
                _line("straight", (0, 0), (5000, 0), 5000),
                _line("diagonal", (0, 0), (3000, 4000), 5000),
            ],
        })
        lines, _, _ = project.to_domain()
        assert [l.locked_90 for l in lines] == [True, False]

    def test_explicit_locked_90_wins(self):
        project = ProjectModel.model_validate({
            "lines": [_line("straight", (0, 0), (5000, 0), 5000, locked_90=False)],
        })
        lines, _, _ = project.to_domain()
        assert lines[0].locked_90 is False

    def test_empty_project(self):
        lines, gates, pool = ProjectModel.model_validate({}).to_domain()
        assert lines == [] and gates == [] and len(pool) == 0

    def test_gate_on_unknown_run(self, client_payload):
        client_payload["gates"][0]["runId"] = "nowhere"
        with pytest.raises(ValidationError):
            ProjectModel.model_validate(client_payload)

    def test_run_points_at_unknown_gate(self, client_payload):
        client_payload["lines"][0]["gateId"] = "ghost"
        with pytest.raises(ValidationError):
            ProjectModel.model_validate(client_payload)

    def test_two_gates_on_one_run(self, client_payload):
        client_payload["lines"][1].pop("gateId")
        client_payload["gates"].append({"id": "gate_2", "type": "single_900", "runId": "run_2"})
        with pytest.raises(ValidationError):
            ProjectModel.model_validate(client_payload)

    def test_duplicate_line_ids(self, client_payload):
        client_payload["lines"][1]["id"] = "run_1"
        with pytest.raises(ValidationError):
            ProjectModel.model_validate(client_payload)

    def test_negative_length(self, client_payload):
        client_payload["lines"][0]["length_mm"] = -1
        with pytest.raises(ValidationError):
            ProjectModel.model_validate(client_payload)


class TestFieldValidation:

    @pytest.mark.parametrize("value", [float("nan"), float("inf")])
    def test_non_finite_coordinate(self, value):
        with pytest.raises(ValidationError):
            PointModel(x=value, y=0)

    def test_unknown_gate_type(self):
        with pytest.raises(ValidationError):
            GateModel.model_validate({"id": "g", "type": "turnstile", "runId": "r"})

    def test_bad_return_direction(self):
        with pytest.raises(ValidationError):
            GateModel.model_validate({
                "id": "g", "type": "sliding_4800", "runId": "r",
                "slidingReturnDirection": "up",
            })

    def test_gate_type_normalised(self):
        gate = GateModel.model_validate({"id": "g", "type": "custom-opening", "runId": "r"})
        assert gate.type == "opening_custom"
