"""Tests for the coverage runner script."""

import sys

from run_coverage import REPO_DIR, coverage_steps


class TestCoverageSteps:
    def test_order_and_interpreter(self):
        steps = coverage_steps()
        assert [s[3] for s in steps] == ["run", "report", "html"]
        for argv in steps:
            assert argv[:3] == [sys.executable, "-m", "coverage"]

    def test_runs_engine_tests(self):
        run = coverage_steps()[0]
        assert run[-3:] == ["-m", "pytest", "camplanner/engine/"]

    def test_measurement_settings_come_from_pyproject(self):
        for argv in coverage_steps():
            assert not any(arg.startswith("--source") for arg in argv)
            assert not any(arg.startswith("--data-file") for arg in argv)
        assert (REPO_DIR / "pyproject.toml").is_file()
