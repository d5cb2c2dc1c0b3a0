"""Highlight Engine - wraps favorite words on a page in marker elements."""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PageElement, PreformattedString, Tag

from vocab_highlighter.services.text_processing import WordMatch, WordMatcher

logger = logging.getLogger(__name__)

MARKER_CLASS = "vh-highlighted-word"
POPUP_CLASS = "vh-word-popup"
EXCLUDED_TAGS = frozenset({"script", "style", "noscript", "svg", "template", "textarea", "head", "title"})


@dataclass(frozen=True)
class HighlightMarker:
    """One wrapped occurrence of a favorite word."""

    marker_id: int
    word: str  # lowercased
    text: str  # original casing


def parse_document(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def _has_class(tag: Tag, class_name: str) -> bool:
    classes = tag.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    return class_name in classes


def is_excluded_element(tag: Tag) -> bool:
    """Elements whose text is never scanned."""
    return (
        tag.name in EXCLUDED_TAGS
        or _has_class(tag, MARKER_CLASS)
        or _has_class(tag, POPUP_CLASS)
    )


class HighlightEngine:
    """
    Annotates a parsed document with markers around favorite words.

    A pass works on a snapshot: qualifying text nodes are collected first,
    their matches computed, and only then are replacements applied. Marker
    and popup subtrees are excluded structurally, so a later pass never
    re-annotates what an earlier one produced.
    """

    def __init__(self, matcher: Optional[WordMatcher] = None):
        self.matcher = matcher if matcher is not None else WordMatcher()
        self._next_marker_id = 1

    def highlight(self, soup: BeautifulSoup, favorites: Iterable[str]) -> List[HighlightMarker]:
        """Clear previous markers and wrap every favorite occurrence.

        Args:
            soup: Parsed document, modified in place.
            favorites: Favorite words in any casing.

        Returns:
            Markers created by this pass, in document order.
        """
        self.clear(soup)
        self.matcher.rebuild(favorites)
        if len(self.matcher) == 0:
            return []

        planned: List[Tuple[NavigableString, List[WordMatch]]] = []
        for node in self.collect_text_nodes(soup):
            matches = self.matcher.find_in_text(str(node))
            if matches:
                planned.append((node, matches))

        markers: List[HighlightMarker] = []
        for node, matches in planned:
            markers.extend(self._replace_node(soup, node, matches))

        logger.debug("Highlighted %d occurrences in %d text nodes", len(markers), len(planned))
        return markers

    def clear(self, soup: BeautifulSoup) -> int:
        """Unwrap markers left by a previous pass, restoring the plain text."""
        existing = soup.find_all(lambda tag: _has_class(tag, MARKER_CLASS))
        for tag in existing:
            tag.unwrap()
        if existing:
            soup.smooth()
        return len(existing)

    def collect_text_nodes(self, soup: BeautifulSoup) -> List[NavigableString]:
        """Text-bearing nodes of the document body outside excluded subtrees."""
        root: Union[BeautifulSoup, Tag] = soup.body or soup
        nodes: List[NavigableString] = []
        for node in root.find_all(string=True):
            if isinstance(node, PreformattedString):
                continue
            if not node.strip():
                continue
            if any(is_excluded_element(parent) for parent in self._parents_within(node, root)):
                continue
            nodes.append(node)
        return nodes

    @staticmethod
    def _parents_within(node: PageElement, root: Union[BeautifulSoup, Tag]) -> Iterable[Tag]:
        parent = node.parent
        while parent is not None:
            yield parent
            if parent is root:
                return
            parent = parent.parent

    def _replace_node(
        self, soup: BeautifulSoup, node: NavigableString, matches: List[WordMatch]
    ) -> List[HighlightMarker]:
        text = str(node)
        pieces: List[PageElement] = []
        markers: List[HighlightMarker] = []
        cursor = 0
        for match in matches:
            if match.start > cursor:
                pieces.append(NavigableString(text[cursor:match.start]))
            marker_id = self._next_marker_id
            self._next_marker_id += 1
            span = soup.new_tag(
                "span",
                attrs={
                    "class": MARKER_CLASS,
                    "data-word": match.word,
                    "data-marker-id": str(marker_id),
                },
            )
            span.string = match.text
            pieces.append(span)
            markers.append(HighlightMarker(marker_id=marker_id, word=match.word, text=match.text))
            cursor = match.end
        if cursor < len(text):
            pieces.append(NavigableString(text[cursor:]))
        node.replace_with(*pieces)
        return markers
