"""Nox sessions orchestrating logshape unit suites."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

import nox


PYTHON_VERSIONS = ["3.11"]
PROJECT_ROOT = Path(__file__).parent

nox.options.sessions = [
    "tests(unit_logging)",
]


def _install_test_requirements(session: nox.Session) -> None:
    """Install the package with its testing toolchain inside the session environment."""

    session.install("-e", f"{PROJECT_ROOT}[test]")


def _run_suite(session: nox.Session, suite: str, targets: Iterable[str]) -> None:
    _install_test_requirements(session)

    args = ["coverage", "run", f"--context={suite}", "--source=logshape", "-m", "pytest"]
    args.extend(targets)
    args.extend(session.posargs)

    session.log("Running %s suite: %s", suite, " ".join(args))
    session.run(*args)
    session.run("coverage", "report", "-m")


@nox.session(python=PYTHON_VERSIONS, reuse_venv=True, name="tests(unit_logging)")
def tests_unit_logging(session: nox.Session) -> None:
    """Execute logshape unit suites with coverage."""

    targets = ["tests/unit/logging"]
    _run_suite(session, "logging", targets)
