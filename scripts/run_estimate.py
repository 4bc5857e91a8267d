"""Helper script to price the sample job (or any job file) from a checkout."""
from __future__ import annotations

import sys

from cleancost.cli import main


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main(sys.argv[1:]))
