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


from sdkmigrator.core.file_reader.file_parser import FileParser
from sdkmigrator.core.file_reader.language_mapper import Language
from sdkmigrator.core.syntax.predicates import (
    ANY_NODE,
    all_,
    any_,
    field,
    find,
    find_all,
    has,
    inside,
    kind,
    node_text,
    not_,
    text_is,
    text_matches,
    walk,
)

SOURCE = """\
def handler(client: StripeClient):
    def inner(client):
        return client.customers.list()

    return client.accounts.retrieve("acct_1")
"""

# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------


def parse(source=SOURCE):
    return FileParser.parse(source, Language.PYTHON).root_node


# -----------------------------------------------------------------------------
# Tests
# -----------------------------------------------------------------------------


def test_kind_and_text_predicates():
    root = parse()
    names = find_all(root, kind("identifier") & text_is("client"))

    assert len(names) == 4
    assert all(node_text(n) == "client" for n in names)


def test_text_matches_is_a_search():
    root = parse()
    type_node = find(root, kind("type"))

    assert text_matches(r"Stripe")(type_node)
    assert not text_matches(r"^Client$")(type_node)


def test_predicates_reject_none():
    assert not kind("identifier")(None)
    assert not ANY_NODE(None)


def test_field_predicate():
    root = parse()
    calls = find_all(
        root,
        kind("call")
        & field(
            "function",
            kind("attribute") & has(text_is("accounts"), stop_by_end=True),
        ),
    )

    assert len(calls) == 1
    assert node_text(calls[0]) == 'client.accounts.retrieve("acct_1")'


def test_has_direct_child_only_without_stop_by_end():
    root = parse()
    outer = find(root, kind("function_definition"))
    identifier_list = kind("identifier") & text_is("list")

    assert not has(identifier_list)(outer)
    assert has(identifier_list, stop_by_end=True)(outer)


def test_has_prunes_subtrees():
    root = parse()
    outer = find(root, kind("function_definition"))
    nested = kind("function_definition")

    assert not has(text_is("list"), stop_by_end=True, prune=nested)(outer)


def test_inside_walks_ancestors():
    root = parse()
    list_name = find(root, kind("identifier") & text_is("list"))

    assert not inside(kind("function_definition"))(list_name)
    assert inside(kind("function_definition"), stop_by_end=True)(list_name)


def test_combinators():
    root = parse()
    identifier = kind("identifier")
    client = text_is("client")

    both = all_(identifier, client)
    either = any_(kind("string"), client)
    neither = not_(identifier)

    assert len(find_all(root, both)) == len(find_all(root, identifier & client))
    assert len(find_all(root, either)) == len(find_all(root, kind("string") | client))
    assert len(find_all(root, neither)) == len(find_all(root, ~identifier))


def test_walk_is_pre_order_and_never_prunes_root():
    root = parse()
    nodes = list(walk(root, prune=kind("module")))

    assert nodes[0] == root
    assert nodes[1].type == "function_definition"


def test_walk_prune_skips_nested_scope():
    root = parse()
    outer = find(root, kind("function_definition"))
    calls = find_all(outer, kind("call"), prune=kind("function_definition"))

    assert [node_text(c) for c in calls] == ['client.accounts.retrieve("acct_1")']
