from __future__ import annotations

import time
from pathlib import Path

from ...core.config import load_config
from ...core.logger import get_logger
from ...core.services import StyleService

log = get_logger(__name__)


def run(args) -> None:
    config = load_config(Path(args.config) if args.config else None)
    if args.css:
        config = config.model_copy(update={"css_file_path": args.css})

    service = StyleService(config)
    sheet = service.load()
    log.info(f"Loaded {len(sheet)} classes from {config.css_path}")
    service.watch(args.interval)
    try:
        while service.cache.watching:
            time.sleep(args.interval)
    except KeyboardInterrupt:
        log.info("Stopping watcher")
    finally:
        service.stop()
