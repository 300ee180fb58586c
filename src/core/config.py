import os
import copy
import yaml
import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

CONFIG_FILENAME = 'weechat_stats.yml'

DEFAULT_CONFIG = {
    'log_level': 'INFO',
    'log_dir': os.path.expanduser("~/.weechat_stats/logs"),
    'encoding': 'utf-8',
    'normalize': True,      # Scrub lines before parsing
    'top_nicks': 10,        # Rows in the report
}

def _candidate_paths(path: Optional[str]):
    if path:
        return [Path(path)]
    return [
        Path.cwd() / CONFIG_FILENAME,
        Path.home() / ".weechat_stats" / "config.yml",
    ]

def load_config(path: Optional[str] = None) -> dict:
    """
    Load settings from YAML, merged over DEFAULT_CONFIG.
    The first existing file wins. Errors fall back to defaults.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    for config_path in _candidate_paths(path):
        if not config_path.exists():
            continue

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Error loading config {config_path}: {e}")
            return config

        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            logger.error(f"Config {config_path} must be a mapping, got {type(loaded).__name__}")
            return config

        config.update(loaded)
        config['log_dir'] = os.path.expanduser(str(config['log_dir']))
        logger.info(f"Loaded config: {config_path}")
        return config

    if path:
        logger.warning(f"Config file not found: {path}")
    return config
