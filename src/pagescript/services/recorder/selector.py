"""CSS selector generation for recorded targets."""

from __future__ import annotations

import soupsieve
from bs4 import Tag


def _is_element(node: object) -> bool:
    # BeautifulSoup (корень документа) тоже Tag, но не элемент
    return isinstance(node, Tag) and node.name != "[document]"


def _nth_of_type(node: Tag) -> int:
    return 1 + len(node.find_previous_siblings(node.name))


def generate_selector(node: Tag) -> str:
    """
    Build a selector for ``node``:

    * ``#id`` when the node has an id;
    * otherwise ``.first-class`` when it has classes;
    * otherwise the ``tag:nth-of-type(n)`` path up to the first ancestor with
      an id (``tag#id``) or to the root, joined with `` > ``.
    """
    node_id = node.get("id")
    if node_id:
        return f"#{soupsieve.escape(str(node_id))}"

    classes = node.get("class")
    if isinstance(classes, str):
        classes = classes.split()
    if classes:
        return f".{soupsieve.escape(classes[0])}"

    path: list[str] = []
    current: object = node
    while _is_element(current):
        assert isinstance(current, Tag)
        part = current.name
        current_id = current.get("id")
        if current_id:
            path.insert(0, f"{part}#{soupsieve.escape(str(current_id))}")
            break
        nth = _nth_of_type(current)
        if nth != 1:
            part += f":nth-of-type({nth})"
        path.insert(0, part)
        current = current.parent
    return " > ".join(path)
