from __future__ import annotations

import json
from pathlib import Path

from ...core.css_extractor import load_stylesheet


def run(args) -> None:
    sheet = load_stylesheet(Path(args.css))
    print(json.dumps(sheet.to_dict(), indent=2))
