"""
End-to-end tests for the floatplace command line.

Runs ``main`` in-process on small netlist files and checks exit codes and
printed output.
"""

import pytest
import yaml

from floatplace.cli import EXIT_ERROR, EXIT_NOT_CONVERGED, EXIT_OK, main


LEGACY_NETLIST = """\
0.0001
2 1 2
0 0
10 0
0 2
1 2
"""

CHAIN_NETLIST = """\
cells:
  - {id: P0, fixed: true, x: 0, y: 0}
  - {id: P1, fixed: true, x: 8, y: 0}
  - {id: A, x: 0, y: 5}
  - {id: B, x: 0, y: 5}
  - {id: C, x: 0, y: 5}
nets:
  - [P0, A]
  - [A, B]
  - [B, C]
  - [C, P1]
"""


@pytest.fixture
def legacy_file(tmp_path):
    path = tmp_path / "pair.txt"
    path.write_text(LEGACY_NETLIST)
    return path


@pytest.fixture
def chain_file(tmp_path):
    path = tmp_path / "chain.yaml"
    path.write_text(CHAIN_NETLIST)
    return path


class TestPlaceCommand:
    """Tests for ``floatplace place``."""

    def test_prints_table(self, legacy_file, capsys):
        assert main(["place", str(legacy_file)]) == EXIT_OK

        out = capsys.readouterr().out
        assert "Status: Converged" in out
        assert "2 5.0 0.0" in out.splitlines()

    def test_writes_output_file(self, chain_file, tmp_path, capsys):
        output = tmp_path / "placed.yaml"
        code = main(["place", str(chain_file), "-o", str(output),
                     "--epsilon", "1e-8", "--max-iterations", "1000"])

        assert code == EXIT_OK
        data = yaml.safe_load(output.read_text())
        positions = {c["id"]: (c["x"], c["y"]) for c in data["cells"]}
        assert positions["B"][0] == pytest.approx(4.0, abs=1e-5)
        assert "Saved to:" in capsys.readouterr().out

    def test_not_converged_exit_code(self, chain_file, capsys):
        code = main(["place", str(chain_file), "--max-iterations", "1"])

        assert code == EXIT_NOT_CONVERGED
        assert "not converged" in capsys.readouterr().out

    def test_config_file_and_flag_precedence(self, chain_file, tmp_path, capsys):
        config = tmp_path / "solver.yaml"
        config.write_text("max_iterations: 1\n")

        assert main(["place", str(chain_file), "-c", str(config)]) == EXIT_NOT_CONVERGED
        assert main(["place", str(chain_file), "-c", str(config),
                     "--max-iterations", "1000"]) == EXIT_OK

    def test_round(self, chain_file, capsys):
        main(["place", str(chain_file), "--round", "--max-iterations", "1000"])
        lines = capsys.readouterr().out.splitlines()

        assert "B 4 0" in lines

    def test_single_pin_policy(self, tmp_path, capsys):
        path = tmp_path / "self.txt"
        path.write_text("0.01\n1 1 2\n0 0\n1 1\n0 1\n")

        assert main(["place", str(path)]) == EXIT_ERROR
        assert "Error:" in capsys.readouterr().err

        assert main(["place", str(path), "--single-pin-nets", "ignore"]) == EXIT_OK
        assert "Ignored 1 single-pin nets" in capsys.readouterr().out


class TestConfigLayering:
    """Settings from the netlist, the config file and flags stack up."""

    def test_config_file_keeps_netlist_settings(self, tmp_path, capsys):
        netlist = tmp_path / "chain.yaml"
        netlist.write_text(
            "config: {max_iterations: 1, convergence_epsilon: 1.0e-12}\n" + CHAIN_NETLIST
        )
        config = tmp_path / "solver.yaml"
        config.write_text("convergence_epsilon: 1.0e-3\n")

        code = main(["place", str(netlist), "-c", str(config)])

        assert code == EXIT_NOT_CONVERGED
        assert "Sweeps: 1" in capsys.readouterr().out.splitlines()

    def test_flags_override_config_file(self, tmp_path, capsys):
        netlist = tmp_path / "chain.yaml"
        netlist.write_text("config: {max_iterations: 1}\n" + CHAIN_NETLIST)
        config = tmp_path / "solver.yaml"
        config.write_text("convergence_epsilon: 1.0e-3\n")

        code = main(["place", str(netlist), "-c", str(config), "--max-iterations", "1000"])
        assert code == EXIT_OK


class TestWirelengthCommand:
    """Tests for ``floatplace wirelength``."""

    def test_prints_wirelength_last(self, legacy_file, capsys):
        assert main(["wirelength", str(legacy_file)]) == EXIT_OK
        assert capsys.readouterr().out.splitlines()[-1] == "10"


class TestErrors:
    """Failure paths map to exit code 1."""

    def test_missing_file(self, tmp_path, capsys):
        assert main(["place", str(tmp_path / "missing.txt")]) == EXIT_ERROR
        assert "Error:" in capsys.readouterr().err

    def test_divergence(self, tmp_path, capsys):
        path = tmp_path / "zero.yaml"
        path.write_text(
            "cells:\n"
            "  - {id: F, fixed: true, x: 1, y: 1}\n"
            "  - {id: A}\n"
            "nets:\n"
            "  - {cells: [F, A], weight: 0}\n"
        )

        assert main(["place", str(path)]) == EXIT_ERROR
        assert "Diverged" in capsys.readouterr().err

    def test_null_config_value(self, chain_file, tmp_path, capsys):
        config = tmp_path / "solver.yaml"
        config.write_text("max_iterations: null\n")

        assert main(["place", str(chain_file), "-c", str(config)]) == EXIT_ERROR
        assert "max_iterations" in capsys.readouterr().err

    def test_broken_config_yaml(self, chain_file, tmp_path, capsys):
        config = tmp_path / "solver.yaml"
        config.write_text("max_iterations: [\n")

        assert main(["place", str(chain_file), "-c", str(config)]) == EXIT_ERROR

    def test_nested_pin(self, tmp_path, capsys):
        path = tmp_path / "nested.yaml"
        path.write_text("cells:\n  - {id: A}\n  - {id: B}\nnets:\n  - [A, [B]]\n")

        assert main(["place", str(path)]) == EXIT_ERROR
        assert "Error:" in capsys.readouterr().err

    def test_quoted_fixed_flag(self, tmp_path, capsys):
        path = tmp_path / "quoted.yaml"
        path.write_text(
            "cells:\n"
            "  - {id: F, fixed: true, x: 0, y: 0}\n"
            "  - {id: A, fixed: \"false\", x: 1, y: 1}\n"
            "nets:\n"
            "  - [F, A]\n"
        )

        assert main(["place", str(path)]) == EXIT_ERROR

    def test_no_command(self, capsys):
        assert main([]) == EXIT_ERROR
