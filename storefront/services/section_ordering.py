"""
Section ordering helpers

Pure list operations behind the drag-and-drop editor. The editor reorders a
local copy with `move_item`, then commits `renumber(...)` through the store's
bulk reorder. Nothing here touches the database.
"""
from typing import Any, Dict, List, Sequence


def _section_id(section: Any) -> Any:
    if isinstance(section, dict):
        return section.get("id", section.get("_id"))
    return getattr(section, "id", None)


def move_item(items: Sequence[Any], old_index: int, new_index: int) -> List[Any]:
    """
    Return a new list with the element at `old_index` moved to `new_index`.

    Negative indices count from the end, as with list indexing. The input is
    not modified.
    """
    result = list(items)
    size = len(result)
    if not -size <= old_index < size:
        raise IndexError(f"old_index {old_index} out of range for {size} items")
    if not -size <= new_index < size:
        raise IndexError(f"new_index {new_index} out of range for {size} items")

    item = result.pop(old_index)
    if new_index < 0:
        new_index += size
    result.insert(new_index, item)
    return result


def renumber(items: Sequence[Any]) -> List[Dict[str, Any]]:
    """Build a bulk reorder payload assigning each item its list position."""
    return [{"id": _section_id(item), "order": index} for index, item in enumerate(items)]
