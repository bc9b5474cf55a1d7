from __future__ import annotations
import sys
import tempfile
from pathlib import Path

from termagent.app_context import AppContext
from termagent.config.models import EngineConfig
from termagent.events.store import EventStore
from termagent.runner import dispatch
from termagent.session.models import ToolInvocation


def run(ctx: AppContext, name: str, **args) -> None:
    res = dispatch(ctx, ToolInvocation(id=f"selftest_{name}", name=name, arguments=args))
    print(f"{name.upper()}:", res.content)


def main():
    with tempfile.TemporaryDirectory() as td:
        cwd = Path(td)
        ctx = AppContext.create(cwd, config=EngineConfig(auto_approve=True), events=EventStore.in_memory())

        run(ctx, "write_file", file="a.txt", content="hello\nworld\n")
        run(ctx, "read_file", file="a.txt")

        (cwd / "node_modules").mkdir()
        (cwd / "node_modules" / "dep.js").write_text("")
        (cwd / ".gitignore").write_text("*.log\n")
        (cwd / "debug.log").write_text("noise\n")
        run(ctx, "list_directory", dir=".", recursive_depth=2)

        # line 2 only
        run(ctx, "edit_file_segment", file="a.txt", mode="line_range", start_line=2, end_line=2, replace="WORLD")
        run(ctx, "edit_file_segment", file="a.txt", mode="find_replace", find="hello", replace="hello!!!")
        run(ctx, "read_file", file="a.txt")

        run(ctx, "mkdir", dir="pkg/sub")
        run(ctx, "stat_file", path="pkg/sub")
        run(ctx, "cd", dir="pkg")
        run(ctx, "exec_command", command=sys.executable, args=["-c", "import os; print(os.getcwd())"], shell=False)
        run(ctx, "exec_command", command="echo $((1+1))")

        print("EVENTS:", ctx.events.types())

if __name__ == "__main__":
    main()
