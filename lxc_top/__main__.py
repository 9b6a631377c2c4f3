#!/usr/bin/env python3
"""Module entrypoint for `lxc_top`.

Usage:
  - `sudo python3 -m lxc_top`
"""

from __future__ import annotations

from .cli import main


if __name__ == "__main__":
    raise SystemExit(main())
