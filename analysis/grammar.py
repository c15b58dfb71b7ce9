# ABOUTME: JavaScript grammar management for the Tree-sitter parser
# ABOUTME: Loads the grammar once, detects lintable files and parses source text

import logging
from enum import Enum
from pathlib import Path
from typing import Optional, Union

import tree_sitter as ts
import tree_sitter_javascript

logger = logging.getLogger(__name__)


class GrammarLoadError(Exception):
    """Exception raised when the JavaScript grammar cannot be loaded"""

    pass


class GrammarStatus(Enum):
    """Status of grammar availability"""
    AVAILABLE = "available"
    ERROR = "error"


class JavaScriptGrammar:
    """
    Owns the Tree-sitter JavaScript language and a reusable parser.
    """

    EXTENSIONS = {".js", ".jsx", ".mjs", ".cjs"}

    _shared: Optional["JavaScriptGrammar"] = None

    def __init__(self) -> None:
        self.status = GrammarStatus.ERROR
        self.language = self._load_language()
        self._parser = ts.Parser()
        self._parser.language = self.language
        self.status = GrammarStatus.AVAILABLE

    @classmethod
    def shared(cls) -> "JavaScriptGrammar":
        """Process-wide grammar instance; loading the language is not free"""
        if cls._shared is None:
            cls._shared = cls()
        return cls._shared

    def _load_language(self) -> ts.Language:
        """Load Tree-sitter grammar for JavaScript"""
        try:
            ts_language_capsule = tree_sitter_javascript.language()
            return ts.Language(ts_language_capsule)
        except Exception as e:
            raise GrammarLoadError(f"Failed to load javascript grammar: {e}") from e

    @classmethod
    def is_lintable(cls, file_path: Union[str, Path]) -> bool:
        """Check if a file extension is handled by this grammar"""
        return Path(file_path).suffix.lower() in cls.EXTENSIONS

    def parse(self, source: Union[str, bytes]) -> ts.Tree:
        """Parse JavaScript source into a syntax tree"""
        data = source.encode("utf-8") if isinstance(source, str) else source
        tree = self._parser.parse(data)
        if tree.root_node.has_error:
            logger.debug("Source contains syntax errors; analysing recoverable parts")
        return tree

    def validate_grammar(self) -> bool:
        """Validate that the grammar works with sample code"""
        try:
            tree = self.parse("function test() { }")
            return tree.root_node.has_error is False
        except Exception:
            return False

    def query(self, pattern: str) -> ts.Query:
        return ts.Query(self.language, pattern)
