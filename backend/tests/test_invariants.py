"""Tests for menu_cms.domain.invariants."""
from types import SimpleNamespace

import pytest

from menu_cms.domain.invariants.exceptions import InvariantViolation
from menu_cms.domain.invariants.hierarchy import assert_forest, assert_not_own_ancestor
from menu_cms.domain.invariants.page import assert_content_kind, assert_parent_in_menu


def page(**fields):
    defaults = {
        "id": "p1",
        "menu_type_id": "header",
        "content_kind": "content",
        "external_url": None,
        "file_path": None,
    }
    defaults.update(fields)
    return SimpleNamespace(**defaults)


class TestAssertForest:
    def test_forest_passes(self):
        assert_forest({"a": None, "b": "a", "c": "b", "d": None})

    def test_dangling_parent_counts_as_root(self):
        assert_forest({"a": "deleted"})

    def test_two_cycle_fails(self):
        with pytest.raises(InvariantViolation):
            assert_forest({"a": "b", "b": "a"})

    def test_self_loop_fails(self):
        with pytest.raises(InvariantViolation):
            assert_forest({"a": "a"})

    def test_long_chain_into_cycle_fails(self):
        parents = {str(i): str(i + 1) for i in range(50)}
        parents["50"] = "40"
        with pytest.raises(InvariantViolation):
            assert_forest(parents)


class TestAssertNotOwnAncestor:
    def test_moving_under_descendant_fails(self):
        parents = {"a": None, "b": "a", "c": "b"}
        with pytest.raises(InvariantViolation):
            assert_not_own_ancestor("a", "c", parents)

    def test_moving_under_sibling_passes(self):
        parents = {"a": None, "b": None, "c": "b"}
        assert_not_own_ancestor("a", "c", parents)

    def test_moving_to_root_passes(self):
        assert_not_own_ancestor("a", None, {"a": "a"})


class TestPageInvariants:
    def test_parent_in_other_menu_fails(self):
        with pytest.raises(InvariantViolation, match="same menu type"):
            assert_parent_in_menu(page(), page(id="p2", menu_type_id="footer"))

    def test_page_as_own_parent_fails(self):
        with pytest.raises(InvariantViolation):
            assert_parent_in_menu(page(), page())

    def test_parent_in_same_menu_passes(self):
        assert_parent_in_menu(page(), page(id="p2"))

    def test_external_link_needs_url(self):
        with pytest.raises(InvariantViolation):
            assert_content_kind(page(content_kind="external_link"))

    def test_file_page_needs_file(self):
        with pytest.raises(InvariantViolation):
            assert_content_kind(page(content_kind="file"))

    def test_content_page_cannot_carry_url(self):
        with pytest.raises(InvariantViolation):
            assert_content_kind(page(external_url="https://example.com"))

    def test_matching_payloads_pass(self):
        assert_content_kind(page())
        assert_content_kind(page(content_kind="external_link", external_url="https://example.com"))
        assert_content_kind(page(content_kind="file", file_path="/tmp/x.pdf"))
