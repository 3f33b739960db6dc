#!/usr/bin/env python3
"""
Java parser environment built from a detected ``ParserConfig``.

Syntax trees come from Tree-sitter with the ``tree-sitter-java`` grammar.
The configuration supplies the per-source-root encodings used to decode
files and is kept alongside the parser so that callers needing classpath or
compliance information (for example a later semantic pass) can read it from
one place.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import tree_sitter_java
from tree_sitter import Language, Parser

from src.config.parser_config import ParserConfig

logger = logging.getLogger(__name__)

JAVA_LANGUAGE = Language(tree_sitter_java.language())


class JavaSourceParser:
    def __init__(self, config: ParserConfig):
        self.config = config
        self._parser = Parser(JAVA_LANGUAGE)

    @property
    def compliance_level(self) -> str:
        return self.config.compliance_level

    def read_source(self, path: Path) -> bytes:
        """Read ``path`` with its source root's encoding and re-encode as UTF-8.

        Tree-sitter works on UTF-8 bytes; decoding errors raise so that the
        caller can skip the file.
        """
        encoding = self.config.encoding_for(path)
        text = path.read_bytes().decode(encoding)
        return text.encode("utf-8")

    def parse_bytes(self, source: bytes) -> Any:
        return self._parser.parse(source)

    def parse_file(self, path: Path) -> tuple[Any, bytes]:
        """Return ``(tree, utf8_source)`` for ``path``."""
        source = self.read_source(path)
        tree = self.parse_bytes(source)
        if tree.root_node.has_error:
            logger.debug(f"Syntax errors while parsing {path}; continuing with partial tree")
        return tree, source
