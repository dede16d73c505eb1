from .loader import load_config
from .models import (
    EngineSettings,
    MarkupConfig,
    RegistrySettings,
)

__all__ = [
    "EngineSettings",
    "MarkupConfig",
    "RegistrySettings",
    "load_config",
]
