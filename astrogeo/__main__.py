"""Allow ``python -m astrogeo``."""

from __future__ import annotations

from .cli import console_main

if __name__ == "__main__":  # pragma: no cover - module execution
    console_main()
