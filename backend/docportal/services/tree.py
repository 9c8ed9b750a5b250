"""Subcategory tree construction and flattening.

Everything here is a pure transformation over rows that were already fetched
from the database. Rows only need the attributes of the ``Subcategory`` model
(``id``, ``category_id``, ``parent_subcategory_id``, ``name``,
``display_name``, ``slug``, ``icon``, ``icon_type``, ``order_index``,
``is_hidden``), so plain objects work as well as ORM instances.

The parent/child walk goes through an index (parent id -> ordered children)
built once in linear time, and every traversal keeps a set of visited ids:
the schema does not forbid a subcategory from naming itself or one of its
descendants as parent, and such cycles are cut and logged instead of
looping forever. Walks use explicit stacks rather than recursion.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence, Union

from ..config import HiddenPolicy
from ..errors import InvalidInputError
from ..models.category import IconType

logger = logging.getLogger(__name__)

INDENT = "  "


@dataclass(frozen=True)
class FontAwesomeIcon:
    """Icon rendered from a Font Awesome class name (e.g. ``fa-folder``)."""
    name: str

    @property
    def type(self) -> str:
        return IconType.FONTAWESOME.value

    @property
    def value(self) -> str:
        return self.name


@dataclass(frozen=True)
class ImageIcon:
    """Icon rendered from an image URL."""
    url: str

    @property
    def type(self) -> str:
        return IconType.IMAGE.value

    @property
    def value(self) -> str:
        return self.url


Icon = Union[FontAwesomeIcon, ImageIcon]


def icon_from_row(icon: Optional[str], icon_type: Optional[str], default: str = "fa-folder-open") -> Icon:
    """Build the icon variant selected by ``icon_type``."""
    if icon_type == IconType.IMAGE.value and icon:
        return ImageIcon(url=icon)
    return FontAwesomeIcon(name=icon or default)


@dataclass
class Guide:
    """A document as listed in the navigation."""
    id: int
    title: str
    slug: str
    description: Optional[str]
    path: str


@dataclass
class SubcategoryNode:
    id: int
    category_id: int
    parent_subcategory_id: Optional[int]
    name: str
    display_name: str
    slug: str
    icon: Icon
    order_index: int
    is_hidden: bool
    children: list["SubcategoryNode"] = field(default_factory=list)
    guides: list[Guide] = field(default_factory=list)


@dataclass
class FlatSubcategory:
    """A subcategory row annotated with its depth, for selection lists."""
    row: Any
    level: int
    indented_name: str

    @property
    def id(self) -> int:
        return self.row.id


def sort_key(row) -> tuple:
    """Sibling order: order_index ascending, then name ascending."""
    return (row.order_index or 0, row.name or "")


def index_by_parent(rows: Sequence, category_id: Optional[int] = None) -> dict[Optional[int], list]:
    """Group rows by parent_subcategory_id, each group in sibling order."""
    if not isinstance(rows, (list, tuple)):
        raise InvalidInputError(f"Expected a list of subcategory rows, got {type(rows).__name__}")

    index: dict[Optional[int], list] = {}
    for row in rows:
        if category_id is not None and row.category_id != category_id:
            continue
        index.setdefault(row.parent_subcategory_id, []).append(row)

    for children in index.values():
        children.sort(key=sort_key)
    return index


def build_guides(row, documents: Sequence, category_slug: str) -> list[Guide]:
    """Turn a subcategory's documents into guides carrying their URL path."""
    return [
        Guide(
            id=doc.id,
            title=doc.title,
            slug=doc.slug,
            description=doc.description,
            path=f"{category_slug}/{row.slug}/{doc.slug}",
        )
        for doc in documents
    ]


def _make_node(row) -> SubcategoryNode:
    return SubcategoryNode(
        id=row.id,
        category_id=row.category_id,
        parent_subcategory_id=row.parent_subcategory_id,
        name=row.name,
        display_name=row.display_name,
        slug=row.slug,
        icon=icon_from_row(row.icon, row.icon_type),
        order_index=row.order_index or 0,
        is_hidden=bool(row.is_hidden),
    )


def build_tree(
    rows: Sequence,
    parent_id: Optional[int] = None,
    category_id: Optional[int] = None,
    include_hidden: bool = False,
    docs_by_subcategory: Optional[Mapping[int, Sequence]] = None,
    category_slug: str = "",
    hidden_policy: HiddenPolicy = HiddenPolicy.PRUNE,
) -> list[SubcategoryNode]:
    """
    Build the nested subcategory tree below ``parent_id`` (None = root level).

    Only rows of ``category_id`` are considered when it is given. Hidden rows
    are skipped unless ``include_hidden`` is set; with ``HiddenPolicy.PRUNE``
    their whole subtree goes with them, with ``HiddenPolicy.PROMOTE`` their
    visible descendants take the hidden node's place. When
    ``docs_by_subcategory`` is given every node gets its documents attached
    as guides whose path is ``<category_slug>/<subcategory_slug>/<doc_slug>``.

    The walk uses an explicit stack, so nesting depth is not bounded by the
    interpreter's recursion limit.
    """
    index = index_by_parent(rows, category_id)
    visited: set[int] = set()
    if parent_id is not None:
        visited.add(parent_id)

    tree: list[SubcategoryNode] = []
    # (row, list the row's node goes into); None marks a pruned subtree,
    # walked only so its rows count as reachable
    stack: list[tuple[Any, Optional[list]]] = [
        (row, tree) for row in reversed(index.get(parent_id, ()))
    ]

    while stack:
        row, target = stack.pop()
        if row.id in visited:
            logger.warning(f"Subcategory {row.id} is part of a parent cycle, skipping it")
            continue
        visited.add(row.id)
        children = index.get(row.id, ())

        if target is None or (row.is_hidden and not include_hidden):
            if target is not None and hidden_policy == HiddenPolicy.PROMOTE:
                stack.extend((child, target) for child in reversed(children))
            else:
                stack.extend((child, None) for child in reversed(children))
            continue

        node = _make_node(row)
        if docs_by_subcategory is not None:
            node.guides = build_guides(row, docs_by_subcategory.get(row.id, ()), category_slug)
        target.append(node)
        stack.extend((child, node.children) for child in reversed(children))

    if parent_id is None:
        unreachable = [
            row.id
            for children in index.values()
            for row in children
            if row.id not in visited
        ]
        if unreachable:
            logger.warning(f"Subcategories not reachable from the root level: {sorted(unreachable)}")

    return tree


def flatten_with_indent(rows: Sequence, category_id: Optional[int] = None) -> list[FlatSubcategory]:
    """
    Flatten the subcategory hierarchy in pre-order for selection dropdowns.

    Each entry carries its depth (root = 0) and the display name indented by
    two spaces per level. Hidden rows are kept.
    """
    index = index_by_parent(rows, category_id)
    visited: set[int] = set()
    result: list[FlatSubcategory] = []
    stack = [(row, 0) for row in reversed(index.get(None, ()))]

    while stack:
        row, level = stack.pop()
        if row.id in visited:
            logger.warning(f"Subcategory {row.id} is part of a parent cycle, skipping it")
            continue
        visited.add(row.id)
        result.append(
            FlatSubcategory(
                row=row,
                level=level,
                indented_name=INDENT * level + row.display_name,
            )
        )
        stack.extend((child, level + 1) for child in reversed(index.get(row.id, ())))

    return result


def flatten_tree(nodes: Sequence[SubcategoryNode], level: int = 0) -> list[tuple[SubcategoryNode, int]]:
    """Pre-order (node, level) pairs of a tree returned by build_tree."""
    result = []
    stack = [(node, level) for node in reversed(nodes)]
    while stack:
        node, depth = stack.pop()
        result.append((node, depth))
        stack.extend((child, depth + 1) for child in reversed(node.children))
    return result
