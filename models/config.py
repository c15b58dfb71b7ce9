import json
import re
from pathlib import Path
from typing import Any, Dict, FrozenSet, Optional, Union

from pydantic import Field, ValidationError, field_validator

from .base import ChainMode, LintBaseModel, PathStyle, RuleName

SUPPORTED_LODASH_VERSIONS = (3, 4)
DEFAULT_CHAIN_DEPTH = 3


class ConfigurationError(Exception):
    """Exception raised when lint configuration is invalid"""

    pass


class LodashSettings(LintBaseModel):
    pragma: Optional[str] = Field(
        default="_", description="Identifier bound to the whole library"
    )
    version: int = Field(default=4, description="Major lodash version")

    @field_validator("pragma")
    @classmethod
    def validate_pragma(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            return None
        if not re.match(r"^[A-Za-z_$][\w$]*$", v):
            raise ValueError(f"Pragma must be a JavaScript identifier: {v}")
        return v

    @field_validator("version")
    @classmethod
    def validate_version(cls, v: int) -> int:
        if v not in SUPPORTED_LODASH_VERSIONS:
            raise ValueError(
                f"Unsupported lodash version {v}, expected one of {SUPPORTED_LODASH_VERSIONS}"
            )
        return v


class ChainingOptions(LintBaseModel):
    mode: ChainMode = Field(default=ChainMode.NEVER, description="Chaining policy")
    depth: int = Field(
        default=DEFAULT_CHAIN_DEPTH,
        ge=2,
        description="Nesting depth at which composition should become a chain",
    )


class PathStyleOptions(LintBaseModel):
    style: PathStyle = Field(
        default=PathStyle.AS_NEEDED, description="Preferred property path notation"
    )


class LintConfig(LintBaseModel):
    settings: LodashSettings = Field(default_factory=LodashSettings)
    chaining: ChainingOptions = Field(default_factory=ChainingOptions)
    path_style: PathStyleOptions = Field(default_factory=PathStyleOptions)
    rules: FrozenSet[RuleName] = Field(
        default=frozenset(RuleName), description="Enabled rules"
    )

    @field_validator("rules")
    @classmethod
    def validate_rules(cls, v: FrozenSet[RuleName]) -> FrozenSet[RuleName]:
        if not v:
            raise ValueError("At least one rule must be enabled")
        return v

    def is_enabled(self, rule: RuleName) -> bool:
        return rule in self.rules

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LintConfig":
        """Build a validated config, raising ConfigurationError on bad input"""
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "LintConfig":
        """Load a JSON config file"""
        config_path = Path(path)
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(
                f"Failed to read config file {config_path}: {e}"
            ) from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Config file {config_path} must contain a JSON object"
            )
        return cls.from_dict(data)
