"""Job file schema and loader for the CLI."""

from .loader import ConfigError, load_job, load_job_from_dict
from .schema import DesignConfig, PackJobConfig, PackingSettingsConfig

__all__ = [
    "ConfigError",
    "DesignConfig",
    "PackJobConfig",
    "PackingSettingsConfig",
    "load_job",
    "load_job_from_dict",
]
