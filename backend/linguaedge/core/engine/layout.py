"""Layout geometry and the above-fold / below-fold partition."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from bs4 import BeautifulSoup
from bs4.element import NavigableString, Tag

from linguaedge.core.engine.extraction import Candidate, kind_of

DEFAULT_FOLD_BUFFER = 200


class Layout(ABC):
    """Source of vertical element positions, relative to the viewport top."""

    @property
    @abstractmethod
    def viewport_height(self) -> float:
        """Height of the viewport."""
        pass

    @abstractmethod
    def top_of(self, element: Tag) -> float:
        """Bounding top of ``element``."""
        pass

    def refresh(self) -> None:
        """Re-read geometry. Called once at the start of every pass."""
        return None


class AttributeLayout(Layout):
    """Reads positions from an attribute on the element or its nearest ancestor.

    Useful when an upstream renderer annotates elements with their
    measured top (e.g. ``data-top="1250"``).
    """

    def __init__(self, viewport_height: float, attribute: str = "data-top", default: float = 0.0):
        self._viewport_height = viewport_height
        self.attribute = attribute
        self.default = default

    @property
    def viewport_height(self) -> float:
        return self._viewport_height

    def top_of(self, element: Tag) -> float:
        current: Optional[Tag] = element
        while current is not None:
            value = current.get(self.attribute) if isinstance(current, Tag) else None
            if isinstance(value, str):
                try:
                    return float(value)
                except ValueError:
                    pass
            current = current.parent
        return self.default


class EstimatedLayout(Layout):
    """Approximates positions from document order.

    Every element that directly holds visible text advances the running
    offset by one line. Good enough to put headings and the first
    paragraphs of a server-rendered page above the fold.
    """

    def __init__(self, document: BeautifulSoup, viewport_height: float, line_height: float = 24.0):
        self.document = document
        self._viewport_height = viewport_height
        self.line_height = line_height
        self._tops: dict[int, tuple[Tag, float]] = {}
        self.refresh()

    @property
    def viewport_height(self) -> float:
        return self._viewport_height

    def refresh(self) -> None:
        self._tops = {}
        body = self.document.body
        if body is None:
            return
        offset = 0.0
        for element in [body, *body.find_all(True)]:
            self._tops[id(element)] = (element, offset)
            if kind_of(element).is_opaque:
                continue
            if any(isinstance(child, NavigableString) and child.strip() for child in element.children):
                offset += self.line_height

    def top_of(self, element: Tag) -> float:
        entry = self._tops.get(id(element))
        if entry is not None and entry[0] is element:
            return entry[1]
        # Not laid out at the last refresh (inserted since): treat as below the fold
        return float("inf")


def fold_line(layout: Layout, buffer: float = DEFAULT_FOLD_BUFFER) -> float:
    return layout.viewport_height + buffer


def partition(
    candidates: Sequence[Candidate],
    layout: Layout,
    buffer: float = DEFAULT_FOLD_BUFFER,
) -> tuple[list[Candidate], list[Candidate]]:
    """Split candidates into (priority, deferred) by the fold line.

    Every candidate lands in exactly one side; order is preserved.
    """
    line = fold_line(layout, buffer)
    priority: list[Candidate] = []
    deferred: list[Candidate] = []

    for candidate in candidates:
        element = candidate.element
        top = layout.top_of(element) if element is not None else float("inf")
        if top < line:
            priority.append(candidate)
        else:
            deferred.append(candidate)

    return priority, deferred
