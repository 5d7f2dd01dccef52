"""
Element classification for hover and click detection.

The engine only calls ``has_qualifying_text`` and ``is_interactive``; hosts
with a real DOM inject their own classifier. ``DefaultElementClassifier``
works on ``ElementRef`` descriptors, which is what the simulated platform
and most bridges hand over.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, FrozenSet, Optional, Protocol

# Surfaces that never count as a reading attempt (drawing, media).
EXCLUDED_TAGS = frozenset({"CANVAS", "SVG", "VIDEO", "IMG", "PICTURE", "IFRAME"})
EXCLUDED_CLASSES = frozenset({"contenedor-lienzo", "drawing-area", "sketch-container", "image-container"})

HOVER_INTERACTIVE_TAGS = frozenset({"BUTTON", "A", "INPUT", "SELECT", "TEXTAREA", "LABEL"})
HOVER_INTERACTIVE_ROLES = frozenset({"button", "link", "menuitem", "tab", "option"})
TEXTUAL_TAGS = frozenset({
    "P", "SPAN", "H1", "H2", "H3", "H4", "H5", "H6",
    "LI", "TD", "TH", "STRONG", "EM", "MARK",
})
MIN_DIRECT_TEXT = 5  # chars of direct text for textual tags

CLICK_INTERACTIVE_TAGS = frozenset({"A", "BUTTON", "INPUT", "SELECT", "TEXTAREA"})
CLICK_INTERACTIVE_ROLES = frozenset({"button", "link", "menuitem", "tab"})


@dataclass(frozen=True)
class ElementRef:
    """Lightweight description of a UI element."""
    tag: str
    text: str = ""                 # full text content
    own_text: str = ""             # direct text nodes only
    aria_label: Optional[str] = None
    role: Optional[str] = None
    classes: FrozenSet[str] = field(default_factory=frozenset)
    onclick: bool = False
    cursor: str = "auto"


class ElementClassifier(Protocol):
    def has_qualifying_text(self, element: Any) -> bool: ...
    def is_interactive(self, element: Any) -> bool: ...


def is_excluded_surface(element: Any) -> bool:
    """
    True for canvases, SVG, media and drawing containers.

    Works on anything exposing ``tag`` / ``classes``; elements without
    them are never excluded here.
    """
    tag = str(getattr(element, "tag", "") or "").upper()
    if tag in EXCLUDED_TAGS:
        return True
    classes = getattr(element, "classes", None) or ()
    return any(cls in EXCLUDED_CLASSES for cls in classes)


class DefaultElementClassifier:
    """Tag/role based classifier over ``ElementRef`` descriptors."""

    def has_qualifying_text(self, element: ElementRef) -> bool:
        if is_excluded_surface(element):
            return False

        tag = element.tag.upper()

        # Interactive elements need a label or some text
        if tag in HOVER_INTERACTIVE_TAGS or (element.role in HOVER_INTERACTIVE_ROLES):
            if element.aria_label:
                return True
            if element.text.strip():
                return True

        # Textual elements need direct text, not inherited from descendants
        if tag in TEXTUAL_TAGS:
            return len(element.own_text.strip()) > MIN_DIRECT_TEXT

        # Generic containers (DIV without direct text, ...) never qualify
        return False

    def is_interactive(self, element: ElementRef) -> bool:
        if element.tag.upper() in CLICK_INTERACTIVE_TAGS:
            return True
        if element.role in CLICK_INTERACTIVE_ROLES:
            return True
        if element.onclick:
            return True
        return element.cursor == "pointer"
