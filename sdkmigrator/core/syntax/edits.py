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


from collections.abc import Iterable
from dataclasses import dataclass

from tree_sitter import Node

from ..exceptions import OverlappingEditError


@dataclass(frozen=True, order=True)
class Edit:
    """Replace bytes [start_byte, end_byte) of the source with `replacement`."""

    start_byte: int
    end_byte: int
    replacement: str

    def overlaps(self, other: "Edit") -> bool:
        # two edits anchored on the same start always conflict, even when empty
        if self.start_byte == other.start_byte:
            return True
        return self.start_byte < other.end_byte and other.start_byte < self.end_byte


def replace(node: Node, new_text: str) -> Edit:
    return Edit(node.start_byte, node.end_byte, new_text)


def commit_edits(content_bytes: bytes, edits: Iterable[Edit]) -> str:
    """
    Apply a batch of disjoint edits and return the new source text.

    The batch is all-or-nothing: if any two edits intersect, nothing is
    applied and OverlappingEditError is raised.
    """
    ordered = sorted(edits)

    for previous, current in zip(ordered, ordered[1:]):
        if previous.overlaps(current):
            raise OverlappingEditError(
                "Planned edits overlap; refusing to guess which one wins",
                f"bytes [{previous.start_byte}, {previous.end_byte}) and "
                f"[{current.start_byte}, {current.end_byte})",
            )

    parts: list[bytes] = []
    cursor = 0
    for edit in ordered:
        if edit.end_byte > len(content_bytes):
            raise ValueError(f"Edit ends past the source text: {edit}")
        parts.append(content_bytes[cursor : edit.start_byte])
        parts.append(edit.replacement.encode("utf8"))
        cursor = edit.end_byte
    parts.append(content_bytes[cursor:])

    return b"".join(parts).decode("utf8")
