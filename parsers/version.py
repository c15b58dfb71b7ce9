import json
import logging
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Union

from packaging import version as pkg_version
from packaging.version import InvalidVersion, Version

logger = logging.getLogger(__name__)

LODASH_PACKAGES = ("lodash", "lodash-es")
DEPENDENCY_SECTIONS = ("dependencies", "devDependencies", "peerDependencies")


class VersionResolutionError(Exception):
    """Exception raised when a lodash version cannot be resolved"""

    pass


class VersionConstraintType(str, Enum):
    EXACT = "exact"          # 4.17.21
    GREATER_THAN = "gt"      # >4.0.0
    GREATER_EQUAL = "gte"    # >=4.0.0
    LESS_THAN = "lt"         # <5.0.0
    LESS_EQUAL = "lte"       # <=4.17.21
    COMPATIBLE = "compatible" # ~4.17.0
    CARET = "caret"          # ^4.17.0
    WILDCARD = "wildcard"    # 4.x, 4.*


@dataclass
class VersionConstraint:
    """A single npm version comparator"""
    constraint_type: VersionConstraintType
    version: Version
    original: str

    def __str__(self) -> str:
        return self.original


class NpmConstraintParser:
    """
    Parses the npm semver constraints found in package.json dependency entries
    """

    OPERATORS = {
        ">=": VersionConstraintType.GREATER_EQUAL,
        "<=": VersionConstraintType.LESS_EQUAL,
        ">": VersionConstraintType.GREATER_THAN,
        "<": VersionConstraintType.LESS_THAN,
        "=": VersionConstraintType.EXACT,
        "^": VersionConstraintType.CARET,
        "~": VersionConstraintType.COMPATIBLE,
    }

    _COMPARATOR = re.compile(r"^(>=|<=|>|<|=|\^|~>?)?\s*v?(\d+(?:\.(?:\d+|[xX*]))*)")

    def parse(self, constraint_str: str) -> List[VersionConstraint]:
        """Parse every comparator of the first satisfiable OR-branch"""
        constraint_str = constraint_str.strip()
        if not constraint_str:
            raise VersionResolutionError("Empty version constraint")

        branch = constraint_str.split("||")[0].strip()

        # Hyphen ranges: "4.0.0 - 4.17.21"
        hyphen = re.match(r"^(\S+)\s+-\s+(\S+)$", branch)
        if hyphen:
            parts = [f">={hyphen.group(1)}", f"<={hyphen.group(2)}"]
        else:
            parts = [part for part in re.split(r"[\s,]+", branch) if part]

        constraints = []
        for part in parts:
            constraint = self._parse_single_constraint(part)
            if constraint:
                constraints.append(constraint)

        if not constraints:
            raise VersionResolutionError(
                f"Unable to parse version constraint: {constraint_str}"
            )
        return constraints

    def _parse_single_constraint(self, constraint_str: str) -> Optional[VersionConstraint]:
        """Parse a single comparator such as ^4.17.0 or 3.x"""
        if constraint_str in ("*", "x", "X", "latest"):
            return None

        match = self._COMPARATOR.match(constraint_str)
        if not match:
            return None

        operator, raw_version = match.group(1) or "", match.group(2)
        if operator == "~>":
            operator = "~"

        if re.search(r"[xX*]", raw_version):
            release = re.split(r"\.(?:[xX*])", raw_version)[0]
            constraint_type = VersionConstraintType.WILDCARD
        else:
            release = raw_version
            constraint_type = self.OPERATORS.get(operator, VersionConstraintType.EXACT)

        try:
            parsed = pkg_version.parse(release)
        except InvalidVersion:
            return None

        return VersionConstraint(constraint_type, parsed, constraint_str)

    def resolve_major(self, constraint_str: str) -> int:
        """Resolve the major version a constraint pins the project to"""
        constraints = self.parse(constraint_str)

        lower_bounds = [
            c for c in constraints
            if c.constraint_type not in (
                VersionConstraintType.LESS_THAN,
                VersionConstraintType.LESS_EQUAL,
            )
        ]
        if lower_bounds:
            return max(c.version for c in lower_bounds).major

        # Only upper bounds: "<5.0.0" means the newest major below the bound
        upper = min(constraints, key=lambda c: c.version)
        if upper.constraint_type == VersionConstraintType.LESS_THAN and upper.version.minor == 0 and upper.version.micro == 0:
            return max(upper.version.major - 1, 0)
        return upper.version.major


def parse_lodash_version(constraint_str: str) -> int:
    """Turn an npm version constraint into a lodash major version"""
    return NpmConstraintParser().resolve_major(constraint_str)


def find_lodash_constraint(package_data: Dict[str, object]) -> Optional[str]:
    """Return the declared lodash constraint from parsed package.json data"""
    for package in LODASH_PACKAGES:
        for section in DEPENDENCY_SECTIONS:
            dependencies = package_data.get(section)
            if isinstance(dependencies, dict) and isinstance(dependencies.get(package), str):
                return dependencies[package]
    return None


def detect_lodash_version(project_dir: Union[str, Path]) -> Optional[int]:
    """
    Detect the lodash major version declared in the nearest package.json.

    Walks up from project_dir. Returns None when no package.json declares lodash.
    """
    current = Path(project_dir).resolve()
    if current.is_file():
        current = current.parent

    for directory in [current, *current.parents]:
        manifest = directory / "package.json"
        if not manifest.exists():
            continue

        try:
            with open(manifest, "r", encoding="utf-8") as f:
                package_data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to read {manifest}: {e}")
            return None

        if not isinstance(package_data, dict):
            return None

        constraint = find_lodash_constraint(package_data)
        if constraint is None:
            logger.debug(f"No lodash dependency declared in {manifest}")
            return None

        major = parse_lodash_version(constraint)
        logger.debug(f"Resolved lodash {constraint!r} from {manifest} to major {major}")
        return major

    return None
