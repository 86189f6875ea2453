"""astrogeo command line interface package."""

from __future__ import annotations

from collections.abc import Sequence

from typer.main import get_command

from .app import app

__all__ = ["app", "console_main", "main"]


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Typer application and return its exit code.

    The command runs in standalone mode so usage errors are reported by
    Typer itself; the resulting ``SystemExit`` becomes the return value.
    """

    command = get_command(app)
    args = list(argv) if argv is not None else None
    try:
        command.main(args=args, prog_name="astrogeo", standalone_mode=True)
    except SystemExit as exc:
        if exc.code is None:
            return 0
        return exc.code if isinstance(exc.code, int) else 1
    return 0


def console_main() -> None:
    raise SystemExit(main())
