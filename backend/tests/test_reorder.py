"""Tests for persisting an edited menu tree."""
import pytest
from sqlalchemy import delete

from menu_cms.application.cms import reorder_pages as reorder_module
from menu_cms.application.cms.reorder_pages import reorder_pages
from menu_cms.application.cms.tree import get_menu_tree
from menu_cms.domain.exceptions import InvalidInput
from menu_cms.domain.hierarchy import flatten_tree
from menu_cms.domain.invariants.exceptions import InvariantViolation
from menu_cms.extensions import db
from menu_cms.models.page import CmsPage

REORDER = "/api/v1/cms-pages/reorder"


def placement(page_id):
    page = db.session.get(CmsPage, page_id)
    return page.parent_id, page.order


@pytest.fixture
def site(make_page):
    home = make_page("Home")
    about = make_page("About", parent_id=home.id)
    contact = make_page("Contact")
    return {"home": home.id, "about": about.id, "contact": contact.id}


class TestReorderApi:
    def test_contact_moves_first(self, client, site):
        tree = [
            {"id": site["contact"], "children": []},
            {"id": site["home"], "children": [{"id": site["about"], "children": []}]},
        ]
        res = client.post(REORDER, json={"tree": tree})

        body = res.get_json()
        assert res.status_code == 200
        assert body["success"] is True
        assert body["data"]["applied"] == 3
        assert body["data"]["failed"] == []

        assert placement(site["contact"]) == (None, 1)
        assert placement(site["home"]) == (None, 2)
        assert placement(site["about"]) == (site["home"], 1)

    def test_nesting_under_a_former_child(self, client, site):
        tree = [
            {"id": site["about"], "children": [{"id": site["home"]}]},
            {"id": site["contact"]},
        ]
        res = client.post(REORDER, json={"tree": tree})

        assert res.status_code == 200
        assert placement(site["about"]) == (None, 1)
        assert placement(site["home"]) == (site["about"], 1)

    def test_records_actor(self, client, site):
        client.post(REORDER, json={"tree": [{"id": site["contact"]}]})
        assert db.session.get(CmsPage, site["contact"]).updated_by == "Admin"

    def test_unknown_id_rejected_without_writes(self, client, site, header):
        tree = [{"id": site["home"], "children": [{"id": "ghost"}]}]
        res = client.post(REORDER, json={"tree": tree, "menu_type_id": header.id})

        assert res.status_code == 400
        assert res.get_json()["errors"] == [{"field": "tree", "message": "Unknown page id: ghost"}]
        assert placement(site["about"]) == (site["home"], 2)

    def test_page_from_other_menu_rejected(self, client, site, make_page, footer):
        legal = make_page("Legal", menu_type_id=footer.id)
        tree = [{"id": site["home"], "children": [{"id": legal.id}]}]

        res = client.post(REORDER, json={"tree": tree})

        assert res.status_code == 400
        assert placement(legal.id) == (None, 4)

    def test_unknown_first_page(self, client, site):
        res = client.post(REORDER, json={"tree": [{"id": "ghost"}]})
        assert res.status_code == 400

    def test_unknown_menu_type(self, client, site):
        res = client.post(REORDER, json={"tree": [{"id": site["home"]}], "menu_type_id": "nope"})
        assert res.status_code == 400

    @pytest.mark.parametrize(
        "body",
        [
            None,
            {},
            {"tree": []},
            {"tree": {"id": "x"}},
            {"tree": ["x"]},
            {"tree": [{"children": []}]},
            {"tree": [{"id": "x"}], "menu_type_id": {"x": 1}},
            {"tree": [{"id": "x"}], "menu_type_id": ["a", "b"]},
            {"tree": [{"id": "x"}], "menu_type_id": 5},
            {"tree": [{"id": "x"}], "menu_type_id": True},
        ],
    )
    def test_malformed_body(self, client, site, body):
        res = client.post(REORDER, json=body)
        assert res.status_code == 400
        assert res.get_json()["success"] is False

    def test_repeated_id(self, client, site):
        tree = [{"id": site["home"], "children": [{"id": site["about"]}]}, {"id": site["about"]}]
        assert client.post(REORDER, json={"tree": tree}).status_code == 400

    def test_partial_failure_is_reported(self, client, site, monkeypatch):
        real_assert_forest = reorder_module.assert_forest

        def delete_contact_meanwhile(parent_by_id):
            real_assert_forest(parent_by_id)
            db.session.execute(delete(CmsPage).where(CmsPage.id == site["contact"]))

        monkeypatch.setattr(reorder_module, "assert_forest", delete_contact_meanwhile)

        tree = [{"id": site["contact"]}, {"id": site["home"], "children": [{"id": site["about"]}]}]
        res = client.post(REORDER, json={"tree": tree})

        body = res.get_json()
        assert res.status_code == 207
        assert body["success"] is False
        assert body["data"]["failed"] == [site["contact"]]
        assert body["data"]["applied"] == 2
        assert placement(site["home"]) == (None, 2)


class TestReorderUseCase:
    def test_subset_of_menu_leaves_others_alone(self, site):
        reorder_pages(tree=[{"id": site["about"]}], actor_id="tester")

        assert placement(site["about"]) == (None, 1)
        assert placement(site["home"]) == (None, 1)
        assert placement(site["contact"]) == (None, 3)

    def test_saving_built_tree_repairs_stored_cycle(self, insert_page, header):
        a = insert_page("A")
        b = insert_page("B", parent_id=a.id)
        a.parent_id = b.id
        db.session.commit()

        forest = get_menu_tree(header.id)
        reorder_pages(tree=[n.to_dict() for n in forest], actor_id="tester")

        repaired = get_menu_tree(header.id)
        assert not any(n.orphaned for n in repaired)
        assert len(repaired) == 1
        assert len(repaired[0].children) == 1

    def test_partial_tree_over_stored_cycle_is_rejected(self, insert_page, header):
        a = insert_page("A")
        b = insert_page("B", parent_id=a.id)
        c = insert_page("C")
        a.parent_id = b.id
        db.session.commit()

        with pytest.raises(InvariantViolation):
            reorder_pages(tree=[{"id": c.id}], actor_id="tester")

    def test_parent_chains_terminate_after_reorder(self, site, header):
        tree = [
            {"id": site["about"], "children": [{"id": site["contact"], "children": [{"id": site["home"]}]}]},
        ]
        reorder_pages(tree=tree, actor_id="tester", menu_type_id=header.id)

        parents = {p.id: p.parent_id for p in CmsPage.query.all()}
        for start in parents:
            seen = set()
            current = start
            while current is not None:
                assert current not in seen
                seen.add(current)
                current = parents.get(current)

    def test_reorder_of_built_tree_is_stable(self, site, header):
        first = get_menu_tree(header.id)
        reorder_pages(tree=[n.to_dict() for n in first], actor_id="tester")

        before = flatten_tree(first)
        after = flatten_tree(get_menu_tree(header.id))
        assert before == after

    def test_empty_tree(self, site):
        with pytest.raises(InvalidInput):
            reorder_pages(tree=[], actor_id="tester")

    def test_non_string_menu_type_rejected_without_writes(self, site):
        with pytest.raises(InvalidInput):
            reorder_pages(tree=[{"id": site["about"]}], actor_id="tester", menu_type_id={"x": 1})

        assert placement(site["about"]) == (site["home"], 2)
