#!/usr/bin/env python3
"""Run the spy-recorder CLI from a source checkout without installing it.

Arguments are forwarded to the Typer application unchanged.
"""

from __future__ import annotations

import sys
from pathlib import Path


def main(argv: list[str] | None = None) -> None:
    """Put ``src`` on ``sys.path`` and invoke the CLI."""
    src_dir = Path(__file__).resolve().parents[1] / "src"
    if str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))

    from spy_recorder.cli import app

    app(prog_name="spy-recorder", args=argv)


if __name__ == "__main__":
    main()
