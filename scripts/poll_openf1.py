"""Poll an OpenF1 route target into a file; see ``openf1-tap --help``."""

from __future__ import annotations

from openf1_tap.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
