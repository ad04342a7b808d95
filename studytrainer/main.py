from __future__ import annotations

"""Entry point for `python -m studytrainer.main`."""

import sys

from . import __version__
from .app.cli import main as cli_main


def cli(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if args[:1] in (["--version"], ["-V"]):
        print(f"studytrainer {__version__}")
        return 0
    return cli_main(args)


if __name__ == "__main__":
    raise SystemExit(cli())
