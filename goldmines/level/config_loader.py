"""Tier configuration loader for the level generator."""

import json
import logging
import os
from dataclasses import asdict, fields
from typing import List

from ..config import (
    TIER_CONFIG_PATH, MIN_ROOMS, MAX_ROOMS, MIN_ROOM_SIZE, MAX_ROOM_SIZE, CORRIDOR_WIDTH, MAX_COINS,
)
from .room_data import LevelConfiguration

logger = logging.getLogger(__name__)


def default_tier_configs() -> List[LevelConfiguration]:
    """The built-in tier tables, one LevelConfiguration per tier."""
    return [
        LevelConfiguration(*row)
        for row in zip(MIN_ROOMS, MAX_ROOMS, MIN_ROOM_SIZE, MAX_ROOM_SIZE, CORRIDOR_WIDTH, MAX_COINS)
    ]


def load_tier_configs(config_path: str = TIER_CONFIG_PATH) -> List[LevelConfiguration]:
    """
    Load tier configurations from a JSON file.

    The file holds ``{"tiers": [{...}, ...]}`` with one object per tier using
    LevelConfiguration field names. A missing file, unreadable JSON or an
    invalid tier falls back to the built-in tables with a warning.

    Args:
        config_path: Path to the configuration file

    Returns:
        List of validated LevelConfiguration, easiest tier first
    """
    if not os.path.exists(config_path):
        logger.warning("Tier config not found: %s, using defaults", config_path)
        return default_tier_configs()

    try:
        with open(config_path, 'r') as f:
            data = json.load(f)

        allowed_keys = {fld.name for fld in fields(LevelConfiguration)}
        tiers = []
        for entry in data.get('tiers', []):
            filtered = {k: int(v) for k, v in entry.items() if k in allowed_keys}
            tiers.append(LevelConfiguration(**filtered).validate())
        if not tiers:
            raise ValueError("no tiers defined")
        logger.info("Loaded %d tiers from %s", len(tiers), config_path)
        return tiers

    except Exception as e:
        logger.warning("Error loading tier config %s: %s, using defaults", config_path, e)
        return default_tier_configs()


def save_tier_configs(tiers: List[LevelConfiguration], config_path: str = TIER_CONFIG_PATH):
    """
    Save tier configurations to a JSON file.

    Args:
        tiers: Configurations to save
        config_path: Path to save the configuration file
    """
    directory = os.path.dirname(config_path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    data = {"tiers": [asdict(tier) for tier in tiers]}
    with open(config_path, 'w') as f:
        json.dump(data, f, indent=2)
    logger.info("Saved %d tiers to %s", len(tiers), config_path)
