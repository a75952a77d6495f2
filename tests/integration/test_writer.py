"""Tests for result serialisation."""

import json

import pytest
import yaml

from floatplace.output.writer import OutputFormat, format_table, write_result
from floatplace.placement.gauss_seidel import solve_placement


@pytest.fixture
def result(balanced_star):
    return solve_placement(balanced_star)


class TestWriteResult:
    """Tests for write_result."""

    def test_yaml(self, result, tmp_path):
        path = write_result(result, tmp_path / "placed.yaml")
        data = yaml.safe_load(path.read_text())

        assert data["status"] == "converged"
        assert [c["id"] for c in data["cells"]] == ["L", "M", "R"]
        assert data["cells"][1]["x"] == pytest.approx(5.0)

    def test_json(self, result, tmp_path):
        path = write_result(result, tmp_path / "placed.json")
        data = json.loads(path.read_text())

        assert data["iterations_run"] == result.iterations_run
        assert data["cells"][2] == {"id": "R", "x": 10.0, "y": 0.0, "fixed": True}

    def test_text(self, result, tmp_path):
        path = write_result(result, tmp_path / "placed.txt")
        lines = path.read_text().splitlines()

        assert lines[0].startswith("# status=converged")
        assert [line.split()[0] for line in lines[1:]] == ["L", "M", "R"]

    def test_explicit_format_overrides_suffix(self, result, tmp_path):
        path = write_result(result, tmp_path / "placed.out", OutputFormat.JSON)
        assert json.loads(path.read_text())["status"] == "converged"

    def test_unknown_suffix_defaults_to_yaml(self, result, tmp_path):
        path = write_result(result, tmp_path / "placed.out")
        assert yaml.safe_load(path.read_text())["status"] == "converged"

    def test_rounded_table(self, result):
        table = format_table(result.rounded())
        assert "M 5 0" in table.splitlines()
