"""utility modules for structurizr-lsp"""

from structurizr_lsp.utils.logging_utils import Logger
from structurizr_lsp.utils.config_utils import (
    ServerConfig,
    load_config_ini,
    get_config_value,
    get_config_int,
    get_config_bool,
)

__all__ = [
    "Logger",
    "ServerConfig",
    "load_config_ini",
    "get_config_value",
    "get_config_int",
    "get_config_bool",
]
