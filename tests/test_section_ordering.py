import pytest

from storefront.models.homepage_section import HomepageSection
from storefront.services.section_ordering import move_item, renumber


class TestMoveItem:
    def test_moves_forward(self):
        assert move_item(["a", "b", "c", "d"], 0, 2) == ["b", "c", "a", "d"]

    def test_moves_backward(self):
        assert move_item(["a", "b", "c", "d"], 3, 1) == ["a", "d", "b", "c"]

    def test_same_index_is_noop(self):
        assert move_item(["a", "b", "c"], 1, 1) == ["a", "b", "c"]

    def test_negative_indices_count_from_end(self):
        assert move_item(["a", "b", "c"], -1, 0) == ["c", "a", "b"]
        assert move_item(["a", "b", "c"], 0, -1) == ["b", "c", "a"]

    def test_input_is_not_modified(self):
        items = ["a", "b", "c"]
        move_item(items, 0, 2)
        assert items == ["a", "b", "c"]

    @pytest.mark.parametrize("old_index, new_index", [(3, 0), (0, 3), (-4, 0)])
    def test_out_of_range_raises(self, old_index, new_index):
        with pytest.raises(IndexError):
            move_item(["a", "b", "c"], old_index, new_index)


class TestRenumber:
    def test_assigns_list_positions(self):
        sections = [{"id": 7}, {"id": 3}, {"id": 9}]
        assert renumber(sections) == [
            {"id": 7, "order": 0},
            {"id": 3, "order": 1},
            {"id": 9, "order": 2},
        ]

    def test_accepts_orm_rows_and_legacy_ids(self):
        rows = [HomepageSection(id=4, name="Hero", type="hero"), {"_id": 2}]
        assert renumber(rows) == [{"id": 4, "order": 0}, {"id": 2, "order": 1}]

    def test_drag_then_commit_payload(self):
        """Dragging the last section to the top renumbers every section."""
        sections = [{"id": 1}, {"id": 2}, {"id": 3}]
        payload = renumber(move_item(sections, 2, 0))
        assert payload == [{"id": 3, "order": 0}, {"id": 1, "order": 1}, {"id": 2, "order": 2}]
