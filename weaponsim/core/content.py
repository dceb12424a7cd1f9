"""
Content loading module for the weapon simulator.

Reads simulation configuration files: either a JSON list of weapon
descriptors, or an object holding the descriptors together with the
simulation settings.
"""

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from weaponsim.core.constants import DEFAULT_ITERATIONS
from weaponsim.core.dice_parser import DiceEngine
from weaponsim.core.utils import cprint
from weaponsim.items.weapon import Weapon

# Sample configuration shipped with the package.
DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "data" / "weapons.json"


class SimulationConfig(BaseModel):
    """Settings and weapons of one simulation."""

    iterations: int = Field(
        default=DEFAULT_ITERATIONS,
        ge=0,
        description="Number of attacks simulated per weapon.",
    )
    seed: int | None = Field(
        default=None,
        description="Seed for reproducible runs, system randomness when unset.",
    )
    weapons: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Weapon descriptors.",
    )


def load_config(filepath: Path, verbose: bool = False) -> SimulationConfig:
    """
    Loads a simulation configuration from a JSON file.

    Args:
        filepath (Path): The file to load.
        verbose (bool): Print a line while loading.

    Returns:
        SimulationConfig: The loaded configuration.

    Raises:
        ValueError: If the file is missing or malformed.

    """
    try:
        if verbose:
            cprint(f"  Loading weapons from {filepath}...", style="bold green")
        if not filepath.exists():
            raise FileNotFoundError(f"File not found: {filepath}")
        if not filepath.is_file():
            raise ValueError(f"Not a file: {filepath}")
        with open(filepath, encoding="utf-8") as f:
            data = json.load(f)
        if isinstance(data, list):
            data = {"weapons": data}
        if not isinstance(data, dict):
            raise ValueError(f"Expected a list or an object, got {type(data).__name__}")
        config = SimulationConfig(**data)
        if not config.weapons:
            raise ValueError("No weapons defined")
        return config
    except (json.JSONDecodeError, FileNotFoundError, ValidationError, ValueError) as e:
        raise ValueError(f"File {filepath} raised an error: {e}") from e


def build_weapons(config: SimulationConfig, engine: DiceEngine | None = None) -> list[Weapon]:
    """
    Builds the weapons described by a configuration.

    Args:
        config (SimulationConfig): The configuration.
        engine (DiceEngine | None): The engine shared by the weapons.

    Returns:
        list[Weapon]: The weapons, in file order.

    Raises:
        ValueError: If two weapons share a name.

    """
    weapons: list[Weapon] = []
    names: set[str] = set()
    for descriptor in config.weapons:
        weapon = Weapon.from_descriptor(descriptor, engine)
        if weapon.name in names:
            raise ValueError(f"Duplicate weapon name: {weapon.name}")
        names.add(weapon.name)
        weapons.append(weapon)
    return weapons
