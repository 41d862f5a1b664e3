"""Minimal client for OpenAI-compatible chat completion, plus a script runner.

Typical usage
-------------
from agency import ConversationClient, ScriptInterpreter
llm = ConversationClient()
interp = ScriptInterpreter()
interp.load("task.txt")
interp.run(llm)

or, from the provided launcher:

python scripts/run_script.py run task.txt
"""

from __future__ import annotations

from .config import ClientConfig, load_config
from .errors import AgencyError, ConfigError, ResourceUnavailable, TransportError
from .llm import ConversationClient, create_from_config
from .script import (
    CommandDirective,
    DecisionDirective,
    PromptDirective,
    Script,
    ScriptInterpreter,
    SystemDirective,
    classify_line,
    parse_script,
)

__all__ = [
    "AgencyError",
    "ClientConfig",
    "CommandDirective",
    "ConfigError",
    "ConversationClient",
    "DecisionDirective",
    "PromptDirective",
    "ResourceUnavailable",
    "Script",
    "ScriptInterpreter",
    "SystemDirective",
    "TransportError",
    "__version__",
    "classify_line",
    "create_from_config",
    "get_version",
    "load_config",
    "parse_script",
]

# ---------------------------------------------------------------------
# Version handling
# ---------------------------------------------------------------------
__version__ = "0.1.0"

def get_version() -> str:
    """Return the package version."""
    return __version__
