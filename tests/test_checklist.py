from datetime import datetime

import pytest

from tomatxt import checklist
from tomatxt.checklist import ChecklistItem


def make_child(note_id, title, position, is_done=False):
    now = datetime.now()
    return {
        "id": note_id,
        "title": title,
        "content": "",
        "parent_id": 1,
        "is_done": is_done,
        "position": position,
        "created_at": now,
        "updated_at": now,
    }


class TestParse:
    def test_empty_and_plain_content(self):
        assert checklist.parse("") == []
        assert checklist.parse("no boxes here") == []

    def test_recognized_line_forms(self):
        content = "\n".join(
            [
                "intro line",
                "- [ ] milk",
                "- [x] eggs",
                "* [X] bread",
                "    - [ ] indented",
                "-[ ] tight",
                "- [-] not a checkbox",
                "- [ ]    ",
                "[ ] no list marker",
                "1. [ ] numbered",
            ]
        )
        assert checklist.parse(content) == [
            ChecklistItem("milk", False),
            ChecklistItem("eggs", True),
            ChecklistItem("bread", True),
            ChecklistItem("indented", False),
            ChecklistItem("tight", False),
        ]

    def test_duplicates_are_independent_entries(self):
        items = checklist.parse("- [ ] same\n- [x] same\n- [ ] same")
        assert [i.completed for i in items] == [False, True, False]
        assert {i.text for i in items} == {"same"}

    def test_text_is_trimmed_and_crlf_tolerated(self):
        assert checklist.parse("- [x]   spaced out   \r\n- [ ] b\r") == [
            ChecklistItem("spaced out", True),
            ChecklistItem("b", False),
        ]

    def test_positions_are_line_indexes(self):
        pairs = checklist.parse_with_positions("title\n\n- [ ] a\ntext\n- [x] b")
        assert [(i, item.text) for i, item in pairs] == [(2, "a"), (4, "b")]


class TestRewrite:
    def test_set_item_status_keeps_indent_and_marker(self):
        content = "notes\n  * [ ] first\n- [ ] second"
        assert checklist.set_item_status(content, 0, True) == "notes\n  * [x] first\n- [ ] second"
        assert checklist.set_item_status(content, 1, True) == "notes\n  * [ ] first\n- [x] second"

    def test_set_item_status_uncheck_and_noop(self):
        assert checklist.set_item_status("- [X] a", 0, False) == "- [ ] a"
        assert checklist.set_item_status("- [X] a", 0, True) == "- [X] a"

    def test_rename_item(self):
        assert checklist.rename_item("x\n- [x] old\n- [ ] keep", 0, " new ") == "x\n- [x] new\n- [ ] keep"

    def test_remove_item(self):
        assert checklist.remove_item("a\n- [ ] one\n- [ ] two", 0) == "a\n- [ ] two"

    def test_out_of_range_index(self):
        with pytest.raises(IndexError):
            checklist.remove_item("- [ ] one", 1)

    def test_find_item_prefers_first_unmatched_occurrence(self):
        content = "- [x] a\n- [ ] a\n- [ ] b"
        assert checklist.find_item(content, "a", True) == 1
        assert checklist.find_item(content, "a", False) == 0
        assert checklist.find_item("- [x] a\n- [x] a", "a", True) == 0
        assert checklist.find_item(content, "missing", True) is None

    def test_strip_checkboxes(self):
        assert checklist.strip_checkboxes("  Heading\n- [ ] a\nbody\n- [x] b\n") == "Heading\nbody"

    def test_progress(self):
        assert checklist.progress([]) == (0, 0.0)
        items = checklist.parse("- [x] a\n- [ ] b\n- [x] c\n- [ ] d")
        assert checklist.progress(items) == (2, 50.0)


class TestPlan:
    def test_creates_for_new_items(self):
        items = checklist.parse("- [ ] a\n- [x] b")
        plan = checklist.plan([], items)
        assert plan.create == [(0, items[0]), (1, items[1])]
        assert plan.keep == [] and plan.delete == []

    def test_reorder_keeps_identity(self):
        children = [make_child(10, "a", 0), make_child(11, "b", 1)]
        plan = checklist.plan(children, checklist.parse("- [ ] b\n- [ ] a"))
        assert [(c["id"], pos) for c, pos, _ in plan.keep] == [(11, 0), (10, 1)]
        assert len(plan.updates) == 2
        assert plan.create == [] and plan.delete == []

    def test_duplicates_match_positionally(self):
        children = [make_child(10, "same", 0), make_child(11, "same", 1)]
        plan = checklist.plan(children, checklist.parse("- [x] same"))
        assert [c["id"] for c, _, _ in plan.keep] == [10]
        assert [c["id"] for c in plan.delete] == [11]
        assert [c["id"] for c, _, _ in plan.updates] == [10]

    def test_removed_text_is_deleted(self):
        children = [make_child(10, "a", 0), make_child(11, "gone", 1)]
        plan = checklist.plan(children, checklist.parse("- [ ] a"))
        assert [c["id"] for c in plan.delete] == [11]
        assert plan.updates == []

    def test_matching_state_is_noop(self):
        children = [make_child(10, "a", 0, True), make_child(11, "b", 1)]
        plan = checklist.plan(children, checklist.parse("- [x] a\n- [ ] b"))
        assert plan.is_noop
