# scripts/smoke.py
"""
Smoke Test Script for the Weekboard history engine.

Drives a small planning session against a real file store and prints what the
history looks like after each step: commits, a preview, a rollback and a
commit that discards the rolled-back future.

Usage
-----
1. Use a throwaway temp directory:
    $ python scripts/smoke.py

2. Use (and keep) a specific state directory:
    $ python scripts/smoke.py --state-dir ./smoke-state
"""

import argparse
import logging
import sys
import tempfile
from pathlib import Path

from dotenv import load_dotenv

from weekboard.core.persistence import FileStore
from weekboard.planner import PlannerEngine, commands, open_planner

env_path = Path(".env")
if env_path.exists():
    load_dotenv(env_path)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)


def _dump(engine: PlannerEngine, label: str) -> None:
    monday = [t.title for t in engine.effective_state().days["Monday"]]
    print(f"\n== {label}")
    print(f"   cursor={engine.cursor} size={len(engine)} preview={engine.preview_index}")
    print(f"   Monday (effective): {monday}")
    for i, entry in enumerate(engine.entries()):
        mark = "*" if i == engine.cursor else " "
        print(f"   {mark} {i}. {entry.description}")


def run(state_dir: Path) -> None:
    """Execute the smoke workflow against ``state_dir``."""
    engine = open_planner(FileStore(state_dir))
    _dump(engine, "Loaded")

    engine.commit(*commands.add_task(engine.read(), "Monday", "add item A"))
    engine.commit(*commands.add_task(engine.read(), "Monday", "add item B"))
    _dump(engine, "After two commits")

    engine.enter_preview(0)
    _dump(engine, "Previewing entry 0")
    engine.exit_preview()

    engine.rollback(engine.cursor - 1)
    _dump(engine, "After rollback")

    engine.commit(*commands.add_task(engine.read(), "Monday", "add item C"))
    _dump(engine, "After commit on top of the rollback")

    print(f"\n💾 State saved to: {FileStore(state_dir).path_for(engine.storage_key)}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the Weekboard smoke test")
    parser.add_argument("--state-dir", "-d", type=Path, help="Directory for the state file")
    args = parser.parse_args()

    if args.state_dir:
        run(args.state_dir)
        return
    with tempfile.TemporaryDirectory(prefix="weekboard-smoke-") as tmp:
        run(Path(tmp))


if __name__ == "__main__":
    main()
