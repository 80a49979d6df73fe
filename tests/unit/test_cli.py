"""
Test coverage for the lockable CLI.
"""

import json
import logging

import pytest
import structlog
from click.testing import CliRunner

from cli.main import cli


RESOURCES_YAML = """
resources:
  - name: A
    labels: gpu
  - name: B
    labels: gpu fast
  - name: C
    labels: fast
    attributes:
      os: windows
"""


@pytest.fixture
def runner():
    yield CliRunner()
    # The CLI points logging at the runner's captured stderr
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()


@pytest.fixture
def resource_file(tmp_path):
    path = tmp_path / "resources.yaml"
    path.write_text(RESOURCES_YAML)
    return str(path)


class TestPoolCommands:
    """Test cases for list and labels."""

    def test_list(self, runner, resource_file):
        result = runner.invoke(cli, ["resources", "list", "-f", resource_file])

        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines[0].startswith("A")
        assert "fast gpu" in lines[1]
        assert all(line.endswith("free") for line in lines)

    def test_list_json(self, runner, resource_file):
        result = runner.invoke(cli, ["resources", "list", "-f", resource_file, "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [r["name"] for r in data] == ["A", "B", "C"]
        assert data[2]["attributes"] == {"os": "windows"}

    def test_labels(self, runner, resource_file):
        result = runner.invoke(cli, ["resources", "labels", "-f", resource_file])

        assert result.exit_code == 0
        assert result.output.split() == ["fast", "2", "gpu", "2"]

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(
            cli, ["resources", "list", "-f", str(tmp_path / "nope.yaml")]
        )

        assert result.exit_code == 1
        assert "Resource file not found" in result.output


class TestValidateCommand:
    """Test cases for validate."""

    def test_valid_labels(self, runner, resource_file):
        result = runner.invoke(cli, [
            "resources", "validate", "-f", resource_file,
            "--labels", "gpu fast", "--numbers", "1 2",
        ])

        assert result.exit_code == 0
        assert "Requirement is valid" in result.output

    def test_unknown_names(self, runner, resource_file):
        result = runner.invoke(cli, [
            "resources", "validate", "-f", resource_file, "--names", "A Z",
        ])

        assert result.exit_code == 1
        assert "do not exist: ['Z']" in result.output

    def test_both_shapes(self, runner, resource_file):
        result = runner.invoke(cli, [
            "resources", "validate", "-f", resource_file,
            "--names", "A", "--labels", "gpu", "--numbers", "1",
        ])

        assert result.exit_code == 1
        assert "not both" in result.output


class TestCheckCommand:
    """Test cases for check."""

    def test_admitted(self, runner, resource_file):
        result = runner.invoke(cli, [
            "resources", "check", "-f", resource_file,
            "--labels", "gpu fast", "--numbers", "1 1",
        ])

        assert result.exit_code == 0
        assert "Admitted: A B" in result.output

    def test_blocked_by_held_resources(self, runner, resource_file):
        result = runner.invoke(cli, [
            "resources", "check", "-f", resource_file,
            "--names", "A B", "--held", "B=5",
        ])

        assert result.exit_code == 2
        assert "Blocked: Waiting for resources [A, B]" in result.output

    def test_params_constrain_selection(self, runner, resource_file):
        result = runner.invoke(cli, [
            "resources", "check", "-f", resource_file,
            "--labels", "fast", "--numbers", "1", "--param", "os=windows",
        ])

        assert result.exit_code == 0
        assert "Admitted: C" in result.output

    def test_no_requirement(self, runner, resource_file):
        result = runner.invoke(cli, ["resources", "check", "-f", resource_file])

        assert result.exit_code == 0
        assert "(no resources)" in result.output

    def test_count_above_total(self, runner, resource_file):
        result = runner.invoke(cli, [
            "resources", "check", "-f", resource_file,
            "--labels", "gpu", "--numbers", "3",
        ])

        assert result.exit_code == 1
        assert "There are only 2 resources with the label: gpu" in result.output

    def test_held_unknown_resource(self, runner, resource_file):
        result = runner.invoke(cli, [
            "resources", "check", "-f", resource_file,
            "--names", "A", "--held", "Z=5",
        ])

        assert result.exit_code == 1
        assert "unknown resource" in result.output
