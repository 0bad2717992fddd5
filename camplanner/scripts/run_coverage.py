#!/usr/bin/env python3
"""Run the engine unit tests under coverage.

What gets measured, where the data file lives and where the HTML report
goes are all set in pyproject.toml ([tool.coverage.*]); this script only
chains the three coverage steps.

Usage (from the repository root):
    python camplanner/scripts/run_coverage.py          # terminal + HTML report
    python camplanner/scripts/run_coverage.py --html   # also open the report
"""

import subprocess
import sys
from pathlib import Path

REPO_DIR = Path(__file__).resolve().parent.parent.parent
HTML_INDEX = REPO_DIR / "coverage_py" / "html" / "index.html"


def coverage_steps(test_dir: str = "camplanner/engine/") -> list[list[str]]:
    """The coverage invocations, in order, as argv lists."""
    cov = [sys.executable, "-m", "coverage"]
    return [
        [*cov, "run", "-m", "pytest", test_dir],
        [*cov, "report"],
        [*cov, "html"],
    ]


def main() -> None:
    labels = ["Running tests", "Coverage report", "Writing HTML report"]
    for label, argv in zip(labels, coverage_steps()):
        print(f"\n=== {label} ===")
        returncode = subprocess.run(argv, cwd=str(REPO_DIR)).returncode
        if returncode != 0:
            sys.exit(returncode)

    print(f"HTML report: {HTML_INDEX}")
    if "--html" in sys.argv[1:]:
        import webbrowser

        webbrowser.open(HTML_INDEX.as_uri())


if __name__ == "__main__":
    main()
