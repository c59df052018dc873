"""Dump the TicketDesk OpenAPI document (with examples) to a JSON file.

Usage: python scripts/generate_openapi.py [output-path]
Defaults to docs/openapi.json at the repository root.
"""
from __future__ import annotations

import json
import sys
from pathlib import Path

from ticketdesk.main import app

DEFAULT_OUTPUT = Path(__file__).resolve().parents[1] / "docs" / "openapi.json"


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    out = Path(argv[0]) if argv else DEFAULT_OUTPUT
    out.parent.mkdir(parents=True, exist_ok=True)
    # The app's openapi() already merges the ticket/comment examples and APIError schema
    out.write_text(json.dumps(app.openapi(), indent=2, ensure_ascii=False, sort_keys=True), encoding="utf-8")
    print(f"Wrote OpenAPI to {out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
