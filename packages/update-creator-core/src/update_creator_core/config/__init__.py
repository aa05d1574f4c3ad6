from .loader import load_config
from .models import (
    CreatorConfig,
    DiffConfig,
    UpdateConfig,
)

__all__ = [
    "CreatorConfig",
    "DiffConfig",
    "UpdateConfig",
    "load_config",
]
