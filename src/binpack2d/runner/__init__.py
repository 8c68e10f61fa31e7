"""Instance generation, run configuration and the experiment runner."""

from .config import InstanceConfig, RunConfig, load_config, parse_config
from .dataset import ProblemInstance, derive_seed, generate_instance, validate_parameters

__all__ = [
    "InstanceConfig",
    "RunConfig",
    "load_config",
    "parse_config",
    "ProblemInstance",
    "derive_seed",
    "generate_instance",
    "validate_parameters",
]
