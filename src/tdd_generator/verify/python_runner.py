from __future__ import annotations

import subprocess
import sys
import tempfile
from pathlib import Path

CANDIDATE_MODULE = "candidate"
TEST_MODULE = "test_candidate.py"

# pytest exit codes
_ALL_PASSED = 0
_NO_TESTS_COLLECTED = 5


def build_test_module(specification: str) -> str:
    return f"from {CANDIDATE_MODULE} import *  # noqa: F401,F403\n\n\n{specification.strip()}\n"


class PythonRunner:
    """
    Runs a pytest specification against candidate code.

    The candidate is written to candidate.py and imported by the test module,
    so its own `if __name__ == "__main__":` block never runs. pytest collects
    test functions, test classes and unittest.TestCase subclasses. run()
    returns "" only when pytest collected tests and all of them passed.
    """

    def __init__(self, specification: str, timeout_s: float = 30.0, python: str = sys.executable):
        self.specification = specification
        self.timeout_s = timeout_s
        self.python = python

    def _command(self, tmp: Path) -> list[str]:
        return [
            self.python, "-m", "pytest",
            "-q",
            "-p", "no:cacheprovider",
            "-c", str(tmp / "pytest.ini"),
            "--rootdir", str(tmp),
            str(tmp / TEST_MODULE),
        ]

    def run(self, code: str) -> str:
        with tempfile.TemporaryDirectory(prefix="tdd_generator_") as tmp_name:
            tmp = Path(tmp_name)
            (tmp / f"{CANDIDATE_MODULE}.py").write_text(code, encoding="utf-8")
            (tmp / TEST_MODULE).write_text(build_test_module(self.specification), encoding="utf-8")
            (tmp / "pytest.ini").write_text("[pytest]\n", encoding="utf-8")

            try:
                proc = subprocess.run(
                    self._command(tmp),
                    cwd=tmp,
                    capture_output=True,
                    text=True,
                    timeout=self.timeout_s,
                )
            except subprocess.TimeoutExpired:
                return f"Timed out after {self.timeout_s:g}s"

        if proc.returncode == _ALL_PASSED:
            return ""
        if proc.returncode == _NO_TESTS_COLLECTED:
            return "No tests were collected from the specification"

        out = (proc.stdout or "").strip()
        err = (proc.stderr or "").strip()
        return out or err or f"pytest exited with code {proc.returncode}"
