"""End-to-end tests for the document table against the API."""

import asyncio
import json

import pytest

from prdstudio.domains.table.edit_session import EditPhase
from prdstudio.domains.table.editors import (
    AssigneeEditor, DueDateEditor, PriorityEditor, StatusEditor, TagsEditor
)
from prdstudio.domains.table.view import DocumentTableView


@pytest.fixture
def view(api, project):
    return DocumentTableView(api, project_id=project.id)


def cell_text(view, document_id, key):
    for row in view.render():
        if row.document_id == document_id:
            for cell in row.cells:
                if cell.key == key:
                    return cell.text
    raise AssertionError(f"cell {document_id}/{key} not rendered")


def bodies(requests):
    return [json.loads(r.content) for r in requests]


class TestStatusEditing:

    async def test_select_new_status(self, view, make_document, sent_patches):
        """Test choosing In Review sends one PATCH and the cell shows the new label."""
        doc = await make_document("Checkout PRD")
        await view.load()

        editor = await view.double_click_cell(doc["id"], "status")
        await editor.select("in-review")

        assert bodies(sent_patches()) == [{"status": "in-review"}]
        assert view.store.phase is EditPhase.DISPLAY
        assert cell_text(view, doc["id"], "status") == "In Review"

    async def test_select_current_status_is_noop(self, view, make_document, sent_patches):
        doc = await make_document("Checkout PRD", status="complete")
        await view.load()

        editor = await view.double_click_cell(doc["id"], "status")
        await editor.select("complete")

        assert sent_patches() == []
        assert view.store.session is None

    async def test_close_commits_highlighted_status(self, view, make_document, sent_patches):
        """Test closing the selector saves the last highlighted value."""
        doc = await make_document("Checkout PRD")
        await view.load()

        editor = await view.double_click_cell(doc["id"], "status")
        editor.highlight("archived")
        await editor.close()

        assert bodies(sent_patches()) == [{"status": "archived"}]

    async def test_cancel_sends_nothing(self, view, make_document, sent_patches):
        doc = await make_document("Checkout PRD")
        await view.load()

        editor = await view.double_click_cell(doc["id"], "status")
        editor.highlight("complete")
        editor.cancel()

        assert sent_patches() == []
        assert cell_text(view, doc["id"], "status") == "Draft"


class TestTagsEditing:

    async def test_add_tag_commits_once_on_close(self, view, make_document, sent_patches):
        """Test tags are saved once when the picker closes, duplicates ignored."""
        doc = await make_document("Checkout PRD", tags=["Product"])
        await view.load()

        editor = await view.click_cell(doc["id"], "tags")
        assert isinstance(editor, TagsEditor)

        editor.set_query("u")
        assert "UX" in editor.suggestions()
        assert "Product" not in editor.suggestions()

        assert editor.add("UX") is True
        assert editor.add("UX") is False
        assert editor.query == ""
        assert sent_patches() == []

        await editor.done()

        assert bodies(sent_patches()) == [{"tags": ["Product", "UX"]}]
        assert cell_text(view, doc["id"], "tags") == "Product, UX"

    async def test_free_form_tag_and_remove(self, view, make_document, sent_patches):
        doc = await make_document("Checkout PRD", tags=["Product", "UX"])
        await view.load()

        editor = await view.click_cell(doc["id"], "tags")
        editor.set_query("  Security ")
        editor.press_enter()
        editor.remove("Product")
        await editor.press_escape()

        assert bodies(sent_patches()) == [{"tags": ["UX", "Security"]}]

    async def test_unchanged_tags_no_request(self, view, make_document, sent_patches):
        doc = await make_document("Checkout PRD", tags=["Product"])
        await view.load()

        editor = await view.click_cell(doc["id"], "tags")
        await editor.done()

        assert sent_patches() == []


class TestTitleEditing:

    async def test_enter_commits(self, view, make_document, sent_patches):
        doc = await make_document("Checkout PRD")
        await view.load()

        editor = await view.double_click_cell(doc["id"], "title")
        editor.set_text("Checkout PRD v2")
        await editor.press_enter()

        assert bodies(sent_patches()) == [{"title": "Checkout PRD v2"}]
        assert view.cache.get(doc["id"]).document.title == "Checkout PRD v2"

    async def test_escape_reverts(self, view, make_document, sent_patches):
        """Test Escape restores the original title without a request."""
        doc = await make_document("Checkout PRD")
        await view.load()

        editor = await view.double_click_cell(doc["id"], "title")
        editor.set_text("Something else")
        await editor.press_escape()

        assert sent_patches() == []
        assert view.cache.get(doc["id"]).document.title == "Checkout PRD"

    async def test_empty_title_rejected(self, view, make_document, sent_patches):
        doc = await make_document("Checkout PRD")
        await view.load()

        editor = await view.double_click_cell(doc["id"], "title")
        editor.set_text("   ")
        result = await editor.press_enter()

        assert result is None
        assert sent_patches() == []
        assert view.store.session is None

    async def test_outside_click_commits(self, view, make_document, sent_patches):
        doc = await make_document("Checkout PRD")
        await view.load()

        editor = await view.double_click_cell(doc["id"], "title")
        editor.set_text("Renamed")
        assert await view.pointer_down() is True

        assert bodies(sent_patches()) == [{"title": "Renamed"}]

    async def test_opening_another_cell_commits_first(self, view, make_document, sent_patches):
        """Test opening a second editor saves the first one."""
        first = await make_document("First")
        second = await make_document("Second")
        await view.load()

        editor = await view.double_click_cell(first["id"], "title")
        editor.set_text("First v2")
        status_editor = await view.double_click_cell(second["id"], "status")

        assert bodies(sent_patches()) == [{"title": "First v2"}]
        assert view.store.is_editing(second["id"], "status")
        assert view.editor is status_editor

    async def test_click_navigates(self, view, make_document):
        doc = await make_document("Checkout PRD")
        await view.load()

        await view.click_cell(doc["id"], "title")

        assert view.selected_document_id == doc["id"]


class TestOtherEditors:

    async def test_priority_remove(self, view, make_document, sent_patches):
        doc = await make_document("Checkout PRD", priority="high")
        await view.load()

        editor = await view.double_click_cell(doc["id"], "priority")
        assert isinstance(editor, PriorityEditor)
        assert [o.label for o in editor.options()] == ["Low", "Medium", "High"]
        await editor.remove()

        assert bodies(sent_patches()) == [{"priority": None}]
        assert cell_text(view, doc["id"], "priority") == "Set priority"

    async def test_assignee_select(self, view, make_document, sent_patches):
        doc = await make_document("Checkout PRD")
        await view.load()

        editor = await view.double_click_cell(doc["id"], "assignedTo")
        assert isinstance(editor, AssigneeEditor)
        assert [m.name for m in editor.options()][0] == "Alex Johnson"
        await editor.select("Emily Chen")

        assert bodies(sent_patches()) == [{"assignedTo": "Emily Chen"}]
        assert cell_text(view, doc["id"], "assignedTo") == "Emily Chen"

    async def test_assignee_close_cancels(self, view, make_document, sent_patches):
        doc = await make_document("Checkout PRD")
        await view.load()

        editor = await view.double_click_cell(doc["id"], "assignedTo")
        await editor.close()

        assert sent_patches() == []
        assert view.store.session is None

    async def test_due_date_no_date(self, view, make_document, sent_patches):
        """Test choosing "no date" saves null."""
        doc = await make_document("Checkout PRD", dueDate="2026-11-01T00:00:00Z")
        await view.load()

        editor = await view.double_click_cell(doc["id"], "dueDate")
        assert isinstance(editor, DueDateEditor)
        await editor.clear()

        assert bodies(sent_patches()) == [{"dueDate": None}]
        assert view.cache.get(doc["id"]).document.due_date is None

    async def test_toggle_favorite(self, view, make_document, sent_patches):
        doc = await make_document("Checkout PRD")
        await view.load()

        await view.toggle_favorite(doc["id"])

        assert bodies(sent_patches()) == [{"favorite": True}]
        assert view.render()[0].favorite is True


class TestFailures:

    async def test_deleted_document(self, api, view, make_document, sent_patches):
        """Test an update of a concurrently deleted document does not raise."""
        doc = await make_document("Checkout PRD")
        await view.load()
        await api.delete(f"/api/documents/{doc['id']}")

        editor = await view.double_click_cell(doc["id"], "status")
        result = await editor.select("complete")

        assert result is None
        assert len(sent_patches()) == 1
        assert view.store.phase is EditPhase.DISPLAY

        await view.load()
        assert view.visible_rows() == []


class TestViewState:

    async def test_filters_and_sort(self, view, make_document):
        await make_document("Beta", status="complete", tags=["Product"])
        await make_document("Alpha", status="complete", tags=["Product", "UX"])
        await make_document("Gamma", status="draft", tags=["Product"])
        await view.load()

        view.toggle_status_filter("complete")
        view.toggle_tag_filter("Product")
        view.toggle_sort("title")

        assert [r.document.title for r in view.visible_rows()] == ["Alpha", "Beta"]

        view.clear_filters()
        view.toggle_sort("title")
        assert [r.document.title for r in view.visible_rows()] == ["Gamma", "Beta", "Alpha"]

    async def test_search(self, view, make_document):
        await make_document("Mobile App")
        await make_document("Web Portal")
        await view.load()

        view.set_search("mobile")

        assert [r.document.title for r in view.visible_rows()] == ["Mobile App"]

    async def test_hidden_columns_not_rendered(self, view, make_document):
        await make_document("Checkout PRD")
        await view.load()

        view.columns.toggle_visibility("col-2", False)
        view.columns.toggle_visibility("col-10", True)

        keys = [h.key for h in view.header()]
        assert "status" not in keys
        assert "comments" in keys
        assert view.render()[0].cells[keys.index("comments")].text == ""

    async def test_common_tags_include_document_tags(self, view, make_document):
        await make_document("Checkout PRD", tags=["Security", "UX"])
        await view.load()

        tags = view.common_tags()

        assert tags[:5] == ["Product", "Feature", "UX", "Technical", "Marketing"]
        assert tags.count("UX") == 1
        assert "Security" in tags


class TestConcurrentCommits:

    async def test_revert_during_in_flight_commit(self, view, make_document, sent_patches):
        """Test the last commit wins when a status change is reverted before the first one finishes."""
        doc = await make_document("Checkout PRD")
        await view.load()

        await asyncio.gather(
            view.store.commit(doc["id"], "status", "complete"),
            view.store.commit(doc["id"], "status", "draft"),
        )

        assert bodies(sent_patches()) == [{"status": "complete"}, {"status": "draft"}]
        assert cell_text(view, doc["id"], "status") == "Draft"

    async def test_editor_sees_row_refreshed_by_outside_click(self, view, make_document, sent_patches):
        """Test an editor opened by the click that saved another cell holds the refreshed row."""
        doc = await make_document("Checkout PRD")
        await view.load()

        editor = await view.double_click_cell(doc["id"], "status")
        editor.highlight("complete")
        priority_editor = await view.double_click_cell(doc["id"], "priority")

        assert bodies(sent_patches()) == [{"status": "complete"}]
        assert priority_editor.row.document.status == "complete"

        priority_editor.cancel()
        status_editor = await view.double_click_cell(doc["id"], "status")
        assert isinstance(status_editor, StatusEditor)
        await status_editor.select("complete")
        assert len(sent_patches()) == 1


class TestIndependentViews:

    async def test_two_tables_do_not_share_state(self, api, project, make_document, sent_patches):
        """Test two tables on one client keep separate edit sessions, columns and sort."""
        doc = await make_document("Checkout PRD")
        first = DocumentTableView(api, project_id=project.id)
        second = DocumentTableView(api, project_id=project.id)
        await first.load()
        await second.load()

        editor = await first.double_click_cell(doc["id"], "title")
        editor.set_text("Checkout PRD v2")

        assert first.store.phase is EditPhase.EDITING
        assert second.store.phase is EditPhase.DISPLAY
        assert second.editor is None

        second.columns.toggle_visibility("col-2", False)
        second.toggle_sort("title")
        assert "status" in [h.key for h in first.header()]
        assert first.sort.field == "updatedAt"

        assert await second.pointer_down() is False
        assert sent_patches() == []
        assert first.store.is_editing(doc["id"], "title")

        assert await first.pointer_down() is True
        assert bodies(sent_patches()) == [{"title": "Checkout PRD v2"}]
        assert second.store.phase is EditPhase.DISPLAY
