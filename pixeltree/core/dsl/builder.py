"""
Tree Builder
============

Converts validated document elements into component trees. Children are
built before their parent so every component is complete when attached.
"""

from typing import Callable, Dict, List, Optional

from pixeltree.core.components import (
    Component,
    Container,
    EllipseComponent,
    ImageComponent,
    RectComponent,
    TextComponent,
)
from pixeltree.models.schemas import ComponentKind, DSLDocument, DSLElement

ComponentFactory = Callable[[DSLElement, List[Component]], Component]


def _container(element: DSLElement, children: List[Component]) -> Component:
    return Container(children, style=element.style, radius=element.radius, label=element.id)


def _image(element: DSLElement, children: List[Component]) -> Component:
    if not element.src:
        raise ValueError("Image element requires 'src'")
    return ImageComponent(element.src, fit=element.fit, style=element.style, label=element.id)


def _text(element: DSLElement, children: List[Component]) -> Component:
    return TextComponent(element.text or "", style=element.style, label=element.id)


def _rect(element: DSLElement, children: List[Component]) -> Component:
    return RectComponent(fill=element.fill, radius=element.radius, style=element.style, label=element.id)


def _ellipse(element: DSLElement, children: List[Component]) -> Component:
    return EllipseComponent(fill=element.fill, style=element.style, label=element.id)


_FACTORIES: Dict[ComponentKind, ComponentFactory] = {
    ComponentKind.CONTAINER: _container,
    ComponentKind.IMAGE: _image,
    ComponentKind.TEXT: _text,
    ComponentKind.RECT: _rect,
    ComponentKind.ELLIPSE: _ellipse,
}


def register_component(kind: ComponentKind, factory: ComponentFactory) -> None:
    """Replace the factory used for a component kind."""
    _FACTORIES[kind] = factory


def build_component(element: DSLElement) -> Component:
    """
    Build a component and its subtree from a document element.

    Args:
        element: Validated document element

    Returns:
        The component for ``element``

    Raises:
        ValueError: If the element cannot be turned into a component
    """
    children = [build_component(child) for child in element.children]
    try:
        factory = _FACTORIES[element.type]
    except KeyError:
        raise ValueError(f"No component registered for type '{element.type.value}'") from None
    return factory(element, children)


def build_tree(document: DSLDocument, root_element: Optional[DSLElement] = None) -> Component:
    """
    Build the component tree of a document.

    A root container without a declared size fills the document canvas.
    """
    element = root_element or document.root
    if element.type == ComponentKind.CONTAINER:
        updates = {}
        if element.style.width is None:
            updates["width"] = float(document.width)
        if element.style.height is None:
            updates["height"] = float(document.height)
        if updates:
            element = element.model_copy(update={"style": element.style.model_copy(update=updates)})
    return build_component(element)
