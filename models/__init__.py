from .base import (
    MESSAGES,
    CallType,
    ChainMode,
    LintBaseModel,
    MessageKind,
    PathStyle,
    RuleName,
)
from .config import (
    DEFAULT_CHAIN_DEPTH,
    SUPPORTED_LODASH_VERSIONS,
    ChainingOptions,
    ConfigurationError,
    LintConfig,
    LodashSettings,
    PathStyleOptions,
)
from .diagnostic import Diagnostic, Fix

__all__ = [
    # Base infrastructure
    "LintBaseModel",
    "ChainMode",
    "PathStyle",
    "MessageKind",
    "CallType",
    "RuleName",
    "MESSAGES",

    # Configuration
    "LintConfig",
    "LodashSettings",
    "ChainingOptions",
    "PathStyleOptions",
    "ConfigurationError",
    "SUPPORTED_LODASH_VERSIONS",
    "DEFAULT_CHAIN_DEPTH",

    # Diagnostics
    "Diagnostic",
    "Fix",
]
