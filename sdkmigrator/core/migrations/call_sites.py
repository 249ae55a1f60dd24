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
Receiver-chain resolution for call expressions.

A receiver chain is the dotted path in front of an invocation, e.g. for
`self.client.customers.list(limit=3)` the segments are
`("self", "client", "customers", "list")`. Only chains made of plain
identifiers and attribute accesses are resolved; anything rooted at a call,
subscript or literal is not a client call site.
"""

from dataclasses import dataclass

from tree_sitter import Node

from ..file_reader.file_parser import SourceUnit
from ..syntax.predicates import node_text
from .models import CallSite, Span


@dataclass(frozen=True)
class ReceiverChain:
    """
    Segments of a call's receiver chain and the node covering each prefix.

    `prefixes[k]` spans `segments[0..k]`, so inserting a qualifier after
    segment k means rewriting `prefixes[k]`.
    """

    segments: tuple[str, ...]
    prefixes: tuple[Node, ...]

    @property
    def root(self) -> str:
        return self.segments[0]

    @property
    def invoked_member(self) -> str:
        return self.segments[-1]


def python_receiver_chain(call: Node) -> ReceiverChain | None:
    """Resolve `call` (a Python `call` node) to its receiver chain."""
    function = call.child_by_field_name("function")
    if function is None or function.type != "attribute":
        return None

    segments: list[str] = []
    prefixes: list[Node] = []
    node = function
    while node is not None and node.type == "attribute":
        attribute = node.child_by_field_name("attribute")
        if attribute is None:
            return None
        segments.append(node_text(attribute))
        prefixes.append(node)
        node = node.child_by_field_name("object")

    if node is None or node.type != "identifier":
        return None

    segments.append(node_text(node))
    prefixes.append(node)
    segments.reverse()
    prefixes.reverse()
    return ReceiverChain(tuple(segments), tuple(prefixes))


def java_receiver_chain(invocation: Node) -> ReceiverChain | None:
    """
    Resolve a Java `method_invocation` whose object is a plain name or a
    `this.name` field access.

    Deeper chains (`a.b().c()`) resolve only at their innermost invocation,
    which is where the versioned accessor belongs.
    """
    obj = invocation.child_by_field_name("object")
    name = invocation.child_by_field_name("name")
    if obj is None or name is None:
        return None

    if obj.type == "identifier":
        return ReceiverChain((node_text(obj), node_text(name)), (obj, invocation))

    if obj.type == "field_access":
        target = obj.child_by_field_name("object")
        member = obj.child_by_field_name("field")
        if target is not None and member is not None and target.type == "this":
            return ReceiverChain(
                ("this", node_text(member), node_text(name)),
                (target, obj, invocation),
            )

    return None


def build_call_site(unit: SourceUnit, call: Node, chain: ReceiverChain) -> CallSite:
    return CallSite(
        span=Span.of(call),
        receiver_chain=chain.segments[:-1],
        invoked_member=chain.invoked_member,
        raw_text=unit.text_of(call),
    )
