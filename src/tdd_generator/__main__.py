from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .errors import GeneratorError
from .llm.code_writer import LLMCodeClient
from .llm.settings import load_generator_settings
from .runtime.generator import Client, Generator, Runner
from .runtime.run_manager import RunManager, RunRecorder
from .schemas.status import State, Status
from .verify.python_runner import PythonRunner


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="tdd_generator",
        description="Generate Python code until it passes the given tests",
    )
    parser.add_argument("--spec-file", type=Path, required=True, help="Python test file the code must satisfy")
    parser.add_argument("--iteration-limit", type=int, default=None, help="Retries allowed after the first attempt")
    parser.add_argument("--timeout", type=float, default=None, help="Seconds allowed per test run")
    parser.add_argument("--runs-dir", default=None, help="Where run artifacts are written")
    parser.add_argument("--output", type=Path, default=None, help="Write the final code to this file")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging verbosity",
    )
    return parser.parse_args(argv)


def print_status(status: Status) -> None:
    if status.state is State.LOADING:
        print("[loading] generating code...")
    elif status.state is State.SUCCESS:
        print(f"[iteration {status.current_iteration}] success")
    else:
        lines = (status.output or "").strip().splitlines()
        last_line = lines[-1] if lines else status.output
        print(f"[iteration {status.current_iteration}] failure: {last_line}")


def main(
    argv: Optional[List[str]] = None,
    client: Optional[Client] = None,
    runner: Optional[Runner] = None,
) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_generator_settings()
        specification = args.spec_file.read_text(encoding="utf-8")
    except (OSError, ValueError) as exc:
        logging.error("Unable to load input: %s", exc)
        return 2

    iteration_limit = args.iteration_limit if args.iteration_limit is not None else settings.iteration_limit
    timeout_s = args.timeout if args.timeout is not None else settings.runner_timeout_s

    try:
        rm = RunManager(args.runs_dir or settings.runs_dir)
        ctx = rm.start(tag="generate")
        recorder = RunRecorder(rm, ctx)
        recorder.save_specification(specification)
    except OSError as exc:
        logging.error("Unable to create run directory: %s", exc)
        return 2

    def on_status(status: Status) -> None:
        recorder(status)
        print_status(status)

    try:
        generator = Generator(
            client=client or LLMCodeClient(),
            runner=runner or PythonRunner(specification, timeout_s=timeout_s),
        )
        result = generator.run(specification, iteration_limit=iteration_limit, on_status=on_status)

        recorder.save_result(result)
        if args.output is not None:
            args.output.parent.mkdir(parents=True, exist_ok=True)
            args.output.write_text(result.generated_code, encoding="utf-8")
    except (GeneratorError, RuntimeError, ValueError, OSError) as exc:
        logging.error("Generation aborted: %s", exc)
        try:
            recorder.save_error(exc)
        except OSError as save_exc:
            logging.error("Unable to write errors.log: %s", save_exc)
        print(json.dumps({"ok": False, "run_id": ctx.run_id, "error": str(exc)}, ensure_ascii=False))
        return 2

    print(f"complies_specifications={result.complies_specifications}")
    print(json.dumps({"ok": result.complies_specifications, "run_id": ctx.run_id, "iterations": result.iterations}, ensure_ascii=False))
    return 0 if result.complies_specifications else 1


if __name__ == "__main__":
    sys.exit(main())
