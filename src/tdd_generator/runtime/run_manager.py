import json
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from ..schemas.status import Result, State, Status


@dataclass
class RunContext:
    run_id: str
    run_dir: Path


class RunManager:
    def __init__(self, root: str = "runs"):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def start(self, tag: str = "run") -> RunContext:
        ts = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        run_id = f"{ts}_{tag}"
        run_dir = self.root / run_id
        run_dir.mkdir(parents=True, exist_ok=False)
        return RunContext(run_id=run_id, run_dir=run_dir)

    def save_text(self, ctx: RunContext, name: str, text: str) -> None:
        (ctx.run_dir / name).write_text(text, encoding="utf-8")

    def save_json(self, ctx: RunContext, name: str, obj: Any) -> None:
        (ctx.run_dir / name).write_text(
            json.dumps(obj, ensure_ascii=False, indent=2),
            encoding="utf-8",
        )

    def save_error(self, ctx: RunContext, err: str) -> None:
        p = ctx.run_dir / "errors.log"
        p.write_text(err + "\n", encoding="utf-8")


class RunRecorder:
    """Status observer that writes every step of a run under ctx.run_dir."""

    def __init__(self, rm: RunManager, ctx: RunContext):
        self.rm = rm
        self.ctx = ctx
        self.statuses: list[Status] = []

    def __call__(self, status: Status) -> None:
        self.statuses.append(status)
        if status.state is State.LOADING:
            self.rm.save_json(self.ctx, "loading.json", status.model_dump(mode="json"))
            return

        prefix = f"iter_{status.current_iteration:02d}"
        self.rm.save_json(self.ctx, f"{prefix}_status.json", status.model_dump(mode="json"))
        if status.generated_code is not None:
            self.rm.save_text(self.ctx, f"{prefix}_code.py", status.generated_code)
        if status.state is State.FAILURE:
            self.rm.save_text(self.ctx, f"{prefix}_output.txt", status.output or "")

    def save_specification(self, specification: str) -> None:
        self.rm.save_text(self.ctx, "specification.py", specification)

    def save_result(self, result: Result) -> None:
        self.rm.save_json(self.ctx, "result.json", result.model_dump(mode="json"))
        self.rm.save_text(self.ctx, "final_code.py", result.generated_code)

    def save_error(self, exc: BaseException) -> None:
        self.rm.save_error(self.ctx, f"{type(exc).__name__}: {exc}")


class Timer:
    def __enter__(self):
        self.t0 = time.time()
        return self
    def __exit__(self, exc_type, exc, tb):
        self.elapsed_s = time.time() - self.t0
