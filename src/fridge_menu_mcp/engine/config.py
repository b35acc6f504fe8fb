"""
Centralized configuration for menu generation.

Provides generation preferences (fridge-aware ranking, fridge netting of
the shopping list, shopping list naming, shuffle seed) with persistence
to menu_planner_preferences.json.
"""

import json
import logging
import os
import random
from dataclasses import dataclass, asdict, replace
from typing import Any, Dict, Optional

log = logging.getLogger("fridge_menu_mcp.config")

# Config file location (working directory unless overridden)
CONFIG_FILE = os.getenv("MENU_PLANNER_CONFIG", "menu_planner_preferences.json")
CONFIG_SECTION = "generation_config"


@dataclass
class GenerationConfig:
    """Preferences applied to every generation request."""

    # Rank candidates by fridge overlap; shuffle them when False
    use_fridge_ranking: bool = True

    # Net shopping list totals against fridge stock
    subtract_fridge: bool = True

    # Appended to the menu name to name its shopping list
    shopping_list_suffix: str = "shopping list"

    # Seed for the shuffle path (None = unseeded)
    random_seed: Optional[int] = None

    def make_rng(self) -> random.Random:
        """Random source for the shuffle path."""
        return random.Random(self.random_seed)


# Global config instance (lazy loaded)
_config: Optional[GenerationConfig] = None

_FIELD_TYPES = {
    'use_fridge_ranking': bool,
    'subtract_fridge': bool,
    'shopping_list_suffix': str,
}


def load_config() -> GenerationConfig:
    """
    Load configuration from file or return defaults.

    Returns:
        GenerationConfig instance
    """
    global _config

    if _config is not None:
        return _config

    _config = GenerationConfig()

    if os.path.exists(CONFIG_FILE):
        try:
            with open(CONFIG_FILE, 'r') as f:
                data = json.load(f)

            section = data.get(CONFIG_SECTION, {})

            for key, cast in _FIELD_TYPES.items():
                if key in section:
                    setattr(_config, key, cast(section[key]))
            if section.get('random_seed') is not None:
                _config.random_seed = int(section['random_seed'])

        except (json.JSONDecodeError, IOError, KeyError, ValueError, TypeError, AttributeError):
            log.warning("Could not read %s, using default generation config", CONFIG_FILE)
            _config = GenerationConfig()

    return _config


def save_config(config: GenerationConfig) -> Dict[str, Any]:
    """
    Save configuration to file.

    Args:
        config: GenerationConfig to save

    Returns:
        Dict with success status
    """
    global _config

    # Load existing preferences to preserve other settings
    existing = {}
    if os.path.exists(CONFIG_FILE):
        try:
            with open(CONFIG_FILE, 'r') as f:
                existing = json.load(f)
        except (json.JSONDecodeError, IOError):
            existing = {}

    existing[CONFIG_SECTION] = asdict(config)

    try:
        with open(CONFIG_FILE, 'w') as f:
            json.dump(existing, f, indent=2)

        _config = config
        return {'success': True, 'config': asdict(config)}
    except IOError as e:
        return {'success': False, 'error': str(e)}


def update_config(**kwargs) -> Dict[str, Any]:
    """
    Update specific configuration values.

    Args:
        **kwargs: Configuration fields to update

    Returns:
        Dict with success status and updated config
    """
    config = replace(load_config())

    suffix = kwargs.get('shopping_list_suffix')
    if suffix is not None and not str(suffix).strip():
        return {'success': False, 'error': 'shopping_list_suffix must not be empty'}

    casts = dict(_FIELD_TYPES, random_seed=int)

    updated = []
    for key, value in kwargs.items():
        if key in casts and value is not None:
            try:
                setattr(config, key, casts[key](value))
            except (TypeError, ValueError):
                return {'success': False, 'error': f"Invalid value for {key}: {value!r}"}
            updated.append(key)

    if updated:
        result = save_config(config)
        result['updated_fields'] = updated
        return result

    return {'success': True, 'message': 'No changes made', 'config': asdict(config)}


def reset_config() -> Dict[str, Any]:
    """
    Reset configuration to defaults.

    Returns:
        Dict with success status
    """
    global _config
    _config = GenerationConfig()
    return save_config(_config)


def clear_cached_config() -> None:
    """Drop the cached config so the next load reads the file (for testing)."""
    global _config
    _config = None


def get_config_summary() -> Dict[str, Any]:
    """
    Get current configuration as a summary.

    Returns:
        Dict with all config values
    """
    config = load_config()
    return {
        'ranking': {
            'use_fridge_ranking': config.use_fridge_ranking,
            'random_seed': config.random_seed,
            'description': 'Rank candidates by fridge overlap, or shuffle them (optionally seeded)'
        },
        'shopping_list': {
            'subtract_fridge': config.subtract_fridge,
            'suffix': config.shopping_list_suffix,
            'description': 'Net required quantities against fridge stock; suffix names the list'
        }
    }
