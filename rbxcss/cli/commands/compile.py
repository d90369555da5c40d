from __future__ import annotations

import json
from pathlib import Path

from ...core.config import load_config
from ...core.elements import alias_tag
from ...core.services import StyleService


def run(args) -> None:
    config = load_config(Path(args.config) if args.config else None)
    if args.css:
        config = config.model_copy(update={"css_file_path": args.css})

    is_text_node = bool(args.text)
    if args.tag:
        _, is_text_node = alias_tag(args.tag)

    service = StyleService(config)
    service.load()
    result = service.style(args.classes, is_text_node)
    print(json.dumps(result.to_dict(), indent=2))
