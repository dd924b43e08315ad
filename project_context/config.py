"""Loading of per-project configuration overrides."""

from __future__ import annotations

import json
import logging
from dataclasses import fields
from pathlib import Path

from project_context.models import ContextConfig

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".project-context.json"


def load_config(project_root: Path | str | None = None) -> ContextConfig:
    """Return defaults overlaid with ``.project-context.json`` if present.

    Unknown keys and malformed files are logged and ignored.
    """
    config = ContextConfig()
    if project_root is None:
        return config

    config_file = Path(project_root) / CONFIG_FILENAME
    if not config_file.is_file():
        return config

    try:
        data = json.loads(config_file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable config %s: %s", config_file, e)
        return config

    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: expected a JSON object", config_file)
        return config

    known = {f.name for f in fields(ContextConfig)}
    for key, value in data.items():
        if key not in known:
            logger.warning("Unknown config key %r in %s", key, config_file)
            continue
        setattr(config, key, value)

    logger.debug("Loaded config overrides from %s", config_file)
    return config
