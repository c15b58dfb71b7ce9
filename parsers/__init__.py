from .path import (
    IDENTIFIER_PATTERN,
    can_be_dot_notation,
    escape_template_text,
    format_array_path,
    from_path,
    join_path_segments,
    quote_js_string,
    to_path,
)
from .version import (
    NpmConstraintParser,
    VersionConstraint,
    VersionConstraintType,
    VersionResolutionError,
    detect_lodash_version,
    parse_lodash_version,
)

__all__ = [
    # Property path grammar
    "to_path",
    "from_path",
    "format_array_path",
    "join_path_segments",
    "can_be_dot_notation",
    "quote_js_string",
    "escape_template_text",
    "IDENTIFIER_PATTERN",
    # Version parsing
    "NpmConstraintParser",
    "VersionConstraint",
    "VersionConstraintType",
    "VersionResolutionError",
    "detect_lodash_version",
    "parse_lodash_version",
]
