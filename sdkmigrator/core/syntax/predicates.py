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


"""
Small predicate-combinator library over Tree-sitter nodes.

Each matching rule of a migration is written as a composition of these
predicates instead of a query string, e.g.

    any_(
        kind("identifier") & text_matches(pattern),
        kind("attribute") & field("object", text_is("stripe")),
    )

Predicates compose with `&`, `|` and `~` as well as with `all_`, `any_`
and `not_`.
"""

import re
from collections.abc import Callable, Iterator

from tree_sitter import Node


class Predicate:
    """A boolean test over a single node."""

    def __init__(self, test: Callable[[Node], bool], description: str = "predicate"):
        self._test = test
        self.description = description

    def __call__(self, node: Node | None) -> bool:
        if node is None:
            return False
        return self._test(node)

    def __and__(self, other: "Predicate") -> "Predicate":
        return all_(self, other)

    def __or__(self, other: "Predicate") -> "Predicate":
        return any_(self, other)

    def __invert__(self) -> "Predicate":
        return not_(self)

    def __repr__(self) -> str:
        return f"Predicate({self.description})"


def node_text(node: Node) -> str:
    return node.text.decode("utf8") if node.text is not None else ""


def kind(*kinds: str) -> Predicate:
    kind_set = frozenset(kinds)
    return Predicate(lambda n: n.type in kind_set, f"kind in {sorted(kind_set)}")


def text_is(*values: str) -> Predicate:
    value_set = frozenset(values)
    return Predicate(lambda n: node_text(n) in value_set, f"text in {sorted(value_set)}")


def text_matches(pattern: re.Pattern | str) -> Predicate:
    """Regex search (not full match) against the node's text."""
    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
    return Predicate(
        lambda n: compiled.search(node_text(n)) is not None,
        f"text ~ /{compiled.pattern}/",
    )


def field(name: str, predicate: Predicate | None = None) -> Predicate:
    """The node has a child under field `name` that satisfies `predicate`."""

    def test(n: Node) -> bool:
        children = n.children_by_field_name(name)
        if predicate is None:
            return bool(children)
        return any(predicate(child) for child in children)

    return Predicate(test, f"field {name}")


def has(
    predicate: Predicate, stop_by_end: bool = False, prune: Predicate | None = None
) -> Predicate:
    """
    A direct child (or, with stop_by_end, any descendant) satisfies `predicate`.

    `prune` stops descending into subtrees whose root satisfies it.
    """

    def test(n: Node) -> bool:
        if not stop_by_end:
            return any(predicate(child) for child in n.named_children)
        for child in n.named_children:
            if find(child, predicate, prune=prune) is not None:
                return True
        return False

    return Predicate(test, f"has {predicate.description}")


def inside(predicate: Predicate, stop_by_end: bool = False) -> Predicate:
    """The parent (or, with stop_by_end, any ancestor) satisfies `predicate`."""

    def test(n: Node) -> bool:
        parent = n.parent
        while parent is not None:
            if predicate(parent):
                return True
            if not stop_by_end:
                return False
            parent = parent.parent
        return False

    return Predicate(test, f"inside {predicate.description}")


def not_(predicate: Predicate) -> Predicate:
    return Predicate(lambda n: not predicate(n), f"not {predicate.description}")


def any_(*predicates: Predicate) -> Predicate:
    return Predicate(
        lambda n: any(p(n) for p in predicates),
        " | ".join(p.description for p in predicates),
    )


def all_(*predicates: Predicate) -> Predicate:
    return Predicate(
        lambda n: all(p(n) for p in predicates),
        " & ".join(p.description for p in predicates),
    )


ANY_NODE = Predicate(lambda n: True, "any")


def walk(root: Node, prune: Predicate | None = None) -> Iterator[Node]:
    """
    Pre-order traversal of named nodes starting at (and including) `root`.

    Descendants whose root satisfies `prune` are skipped together with their
    subtree. `root` itself is never pruned.
    """
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        for child in reversed(node.named_children):
            if prune is not None and prune(child):
                continue
            stack.append(child)


def find_all(root: Node, predicate: Predicate, prune: Predicate | None = None) -> list[Node]:
    return [n for n in walk(root, prune) if predicate(n)]


def find(root: Node, predicate: Predicate, prune: Predicate | None = None) -> Node | None:
    for n in walk(root, prune):
        if predicate(n):
            return n
    return None
