"""
cmder - Constructeur fluent de commandes système.

Modules disponibles:
- commands: Construction et exécution de commandes (Command, Context)
- logging: Loggers de commandes (ConsoleLogger, FileLogger, MemoryLogger)
- config: Paramètres ambiants (CmderSettings, CmderConfig, dry-run global)
- errors: Exceptions du package (CmderError et dérivées)
"""

__version__ = "1.0.0"

from cmder.logging import (
    Logger,
    Color,
    ConsoleLogger,
    FileLogger,
    MemoryLogger,
    NullLogger,
)
from cmder.config import (
    CmderSettings,
    CmderConfig,
    get_config,
    get_logger,
    load_settings,
    set_dry_run,
    set_logger,
    settings_from_env,
)
from cmder.errors import (
    CmderError,
    ConfigurationError,
    CommandError,
    CommandSpawnError,
    CommandExitError,
    CommandStreamError,
    InvalidTransitionError,
    ContextError,
    ContextCanceledError,
    DeadlineExceededError,
)
from cmder.commands import (
    Cmder,
    Command,
    CommandResult,
    CommandState,
    Context,
    new,
)

__all__ = [
    # Logging
    "Logger",
    "Color",
    "ConsoleLogger",
    "FileLogger",
    "MemoryLogger",
    "NullLogger",
    # Config
    "CmderSettings",
    "CmderConfig",
    "get_config",
    "get_logger",
    "load_settings",
    "set_dry_run",
    "set_logger",
    "settings_from_env",
    # Errors
    "CmderError",
    "ConfigurationError",
    "CommandError",
    "CommandSpawnError",
    "CommandExitError",
    "CommandStreamError",
    "InvalidTransitionError",
    "ContextError",
    "ContextCanceledError",
    "DeadlineExceededError",
    # Commands
    "Cmder",
    "Command",
    "CommandResult",
    "CommandState",
    "Context",
    "new",
]
