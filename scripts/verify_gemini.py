#!/usr/bin/env python3
from __future__ import annotations

import sys
from pathlib import Path


def run() -> int:
  repo_root = Path(__file__).resolve().parents[1]
  backend_dir = repo_root / "backend"
  if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

  from healthmonitor_ai.connectivity import main

  return main()


if __name__ == "__main__":
  raise SystemExit(run())
