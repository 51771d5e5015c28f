"""Candidate extraction - decides which document text gets translated.

The same extraction is used by every phase, parameterized by a subtree
root. Text candidates always come before attribute candidates.
"""

from dataclasses import dataclass
from typing import Optional, Union

from bs4.element import NavigableString, PageElement, PreformattedString, Tag, TemplateString

from linguaedge.core.engine.context import EngineContext
from linguaedge.models.enums import CandidateKind, HeadMeta, TagKind, TranslatableAttribute

OPT_OUT_ATTRIBUTE = "translate"
OPT_OUT_VALUE = "no"


@dataclass(eq=False)
class Candidate:
    """A translation unit bound to the document location it came from.

    ``node`` is the text node for TEXT candidates and the element for
    ATTRIBUTE candidates; ``source`` is the trimmed text sent for
    translation.
    """

    kind: CandidateKind
    node: Union[NavigableString, Tag]
    source: str
    attribute: Optional[str] = None

    @property
    def element(self) -> Optional[Tag]:
        """Element whose geometry decides the candidate's partition."""
        if self.kind is CandidateKind.TEXT:
            return self.node.parent
        return self.node

    def current_source(self) -> Optional[str]:
        """Trimmed text currently at this location (None if detached/removed)."""
        if self.kind is CandidateKind.TEXT:
            if self.node.parent is None:
                return None
            return str(self.node).strip()
        value = self.node.get(self.attribute)
        if not isinstance(value, str):
            return None
        return value.strip()


def kind_of(element: Optional[Tag]) -> TagKind:
    if element is None:
        return TagKind.OTHER
    return TagKind.of(element.name)


def is_opted_out(node: PageElement) -> bool:
    """True if ``node`` or any ancestor carries ``translate="no"``."""
    element = node if isinstance(node, Tag) else node.parent
    while element is not None:
        if isinstance(element, Tag) and element.get(OPT_OUT_ATTRIBUTE) == OPT_OUT_VALUE:
            return True
        element = element.parent
    return False


def _is_text_node(node: PageElement) -> bool:
    # Comments, CDATA, doctypes and template content are never visible text
    return (
        isinstance(node, NavigableString)
        and not isinstance(node, (PreformattedString, TemplateString))
    )


def collect_text_candidates(root: Tag, ctx: EngineContext) -> list[Candidate]:
    """Collect visible text nodes under ``root``.

    Under <head> only <title> text is eligible.
    """
    head_mode = kind_of(root) is TagKind.HEAD
    candidates = []

    for node in root.descendants:
        if not _is_text_node(node) or node in ctx.marker:
            continue

        text = str(node).strip()
        parent = node.parent
        if not text or not isinstance(parent, Tag):
            continue

        parent_kind = kind_of(parent)
        if parent_kind.is_opaque:
            continue
        if head_mode and parent_kind is not TagKind.TITLE:
            continue
        if is_opted_out(parent):
            continue

        candidates.append(Candidate(kind=CandidateKind.TEXT, node=node, source=text))

    return candidates


def _attribute_candidate(element: Tag, attribute: str) -> Optional[Candidate]:
    value = element.get(attribute)
    if not isinstance(value, str) or not value.strip():
        return None
    return Candidate(
        kind=CandidateKind.ATTRIBUTE,
        node=element,
        source=value.strip(),
        attribute=attribute,
    )


def collect_attribute_candidates(root: Tag, ctx: EngineContext) -> list[Candidate]:
    """Collect translatable attribute values under ``root`` (root included).

    One candidate per attribute present. Under <head>, the ``content`` of
    the known SEO/social meta elements is collected as well.
    """
    candidates = []

    for element in [root, *root.find_all(True)]:
        if element in ctx.marker or is_opted_out(element):
            continue
        for attribute in TranslatableAttribute:
            candidate = _attribute_candidate(element, attribute.value)
            if candidate:
                candidates.append(candidate)

    if kind_of(root) is TagKind.HEAD:
        for meta in HeadMeta:
            element = root.find(TagKind.META.value, attrs=meta.selector)
            if element is None or element in ctx.marker or is_opted_out(element):
                continue
            candidate = _attribute_candidate(element, "content")
            if candidate:
                candidates.append(candidate)

    return candidates


def extract(root: Tag, ctx: EngineContext) -> list[Candidate]:
    """Full extraction of ``root``: text candidates, then attribute candidates."""
    return collect_text_candidates(root, ctx) + collect_attribute_candidates(root, ctx)
