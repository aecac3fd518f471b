"""Configuration management for EDFL cavity simulations."""

from typing import Dict, Any
import json
from dataclasses import asdict, replace

from ..models import (
    CavityConfig,
    DERIVATIVE_CONSTANTS,
    POPULATION_CONSTANTS,
)

class ConfigManager:
    """Manages simulation configuration and parameters."""

    @staticmethod
    def load_config(filepath: str) -> Dict[str, Any]:
        """Load configuration from a JSON file."""
        with open(filepath, 'r') as f:
            return json.load(f)

    @staticmethod
    def save_config(config: Dict[str, Any], filepath: str) -> None:
        """Save configuration to a JSON file."""
        with open(filepath, 'w') as f:
            json.dump(config, f, indent=2)

    @staticmethod
    def validate_config(config: Dict[str, Any]) -> bool:
        """Validate configuration dictionary."""
        if 'cavity' not in config:
            raise ValueError("Missing required section: cavity")
        if 'pump_power' not in config['cavity']:
            raise ValueError("Missing required cavity parameter: pump_power")
        return True

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> Dict[str, Any]:
        """Create parameter objects from configuration dictionary."""
        cls.validate_config(config_dict)

        cavity = CavityConfig(**config_dict['cavity'])
        cavity.validate()

        # Constant sections only override the defaults they name
        physics = replace(DERIVATIVE_CONSTANTS, **config_dict.get('physics', {}))
        population = replace(POPULATION_CONSTANTS, **config_dict.get('population_physics', {}))

        return {
            'cavity': cavity,
            'physics': physics,
            'population_physics': population,
            'solver': config_dict.get('solver', {}),
            'simulation': config_dict.get('simulation', {})
        }

    @classmethod
    def to_dict(cls, params: Dict[str, Any]) -> Dict[str, Any]:
        """Convert parameter objects back to dictionary."""
        cavity = asdict(params['cavity'])
        cavity['pump_direction'] = params['cavity'].pump_direction.value
        return {
            'cavity': cavity,
            'physics': asdict(params.get('physics', DERIVATIVE_CONSTANTS)),
            'population_physics': asdict(params.get('population_physics', POPULATION_CONSTANTS)),
            'solver': params.get('solver', {}),
            'simulation': params.get('simulation', {})
        }

# Default configuration
def get_default_config() -> Dict[str, Any]:
    """Get default configuration parameters."""
    return {
        "cavity": {
            "pump_power": 100e-3,  # W
            "fiber_length": 10.0,  # m
            "segments": 100,
            "r1": 0.98,
            "r2": 0.1,
            "pump_direction": "forward"
        },
        "solver": {
            "tolerance": 1e-4,  # W
            "max_iterations": 40
        },
        "physics": {},
        "population_physics": {},
        "simulation": {
            "make_plots": False
        }
    }
