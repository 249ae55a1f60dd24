# -----------------------------------------------------------------------------
# sdkmigrator - Dual Licensed Software
# Copyright (c) 2025 Adem Can
#
# This file is part of sdkmigrator.
#
# sdkmigrator is available under a dual-license:
#   1. AGPLv3 (Affero General Public License v3)
#      - See LICENSE.txt and LICENSE-AGPL.txt
#      - Online: https://www.gnu.org/licenses/agpl-3.0.html
#
#   2. Commercial License
#      - For proprietary or revenue-generating use,
#        including SaaS, embedding in closed-source software,
#        or avoiding AGPL obligations.
#      - See LICENSE.txt and COMMERCIAL-LICENSE.txt
#      - Contact: ademfcan@gmail.com
#
# By using this file, you agree to the terms of one of the two licenses above.
# -----------------------------------------------------------------------------


from dataclasses import dataclass
from pathlib import Path

from loguru import logger
from tree_sitter import Node
from tree_sitter_language_pack import get_parser

from ..exceptions import ParseError
from .language_mapper import Language


@dataclass(frozen=True)
class SourceUnit:
    """One parsed file: the original bytes and the root of its syntax tree.

    The tree is never edited in place; rewriting produces new source text.
    """

    content_bytes: bytes
    root_node: Node
    language: Language
    path: Path | None = None

    def text_of(self, node: Node) -> str:
        return self.content_bytes[node.start_byte : node.end_byte].decode("utf8")

    @property
    def display_name(self) -> str:
        return str(self.path) if self.path is not None else "<memory>"


class FileParser:
    """Parses source text with Tree-sitter for a known language."""

    @classmethod
    def parse(
        cls,
        file_content: str,
        language: Language,
        path: Path | None = None,
    ) -> SourceUnit:
        """
        Parse source text into a SourceUnit.

        Args:
            file_content: Content of the file to parse
            language: Grammar to parse with
            path: Where the content came from, for reporting only

        Returns:
            SourceUnit containing the bytes and the root node

        Raises:
            ParseError: if no parser is available or the text is not valid syntax
        """
        name = str(path) if path is not None else "<memory>"

        try:
            parser = get_parser(language.tree_sitter_name)
        except Exception as e:
            logger.debug(f"Failed to get parser for {language.value} error: {e}")
            raise ParseError(
                f"No parser available for {language.value}", str(e)
            ) from e

        content_bytes = file_content.encode("utf8")
        tree = parser.parse(content_bytes)
        root_node = tree.root_node

        if root_node.has_error:
            error_node = cls._first_error(root_node)
            line = error_node.start_point[0] + 1 if error_node is not None else 0
            raise ParseError(
                f"Invalid {language.value} syntax in {name}",
                f"First syntax error near line {line}",
            )

        return SourceUnit(
            content_bytes=content_bytes,
            root_node=root_node,
            language=language,
            path=path,
        )

    @staticmethod
    def _first_error(node: Node) -> Node | None:
        if node.type == "ERROR" or node.is_missing:
            return node
        for child in node.children:
            if child.has_error or child.is_missing:
                found = FileParser._first_error(child)
                if found is not None:
                    return found
        return None
