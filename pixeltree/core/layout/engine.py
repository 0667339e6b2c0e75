"""
Layout Engine
=============

Box-model placement of children inside their parent's content box.
All math runs in logical units; scaling happens when render params are built.
"""

from typing import List, Sequence

from pixeltree.core.layout.geometry import Rect
from pixeltree.models.style import Alignment, ComponentStyle, StackDirection


def content_box(box: Rect, style: ComponentStyle) -> Rect:
    """The area left for children once the padding is removed."""
    return box.inset(style.padding)


def aligned_offset(alignment: Alignment, available: float, extent: float) -> float:
    """Offset that places ``extent`` inside ``available`` (start/center/end)."""
    return alignment.factor * (available - extent)


def stacked_extent(style: ComponentStyle, child_styles: Sequence[ComponentStyle]) -> float:
    """Total main-axis size of all children including the spacing between them."""
    if not child_styles:
        return 0.0
    if style.direction == StackDirection.VERTICAL:
        sizes = [child.height for child in child_styles]
    else:
        sizes = [child.width for child in child_styles]
    return sum(sizes) + style.spacing * (len(sizes) - 1)


def layout_children(
    box: Rect,
    style: ComponentStyle,
    child_styles: Sequence[ComponentStyle],
) -> List[Rect]:
    """
    Compute the outer box of every child.

    Children stack along the parent's direction, a cursor advancing by each
    child's extent plus the parent's spacing. On the cross axis every child is
    aligned within the content box by its own alignment; on the main axis the
    whole stacked block is offset once, by the parent's alignment of the
    remaining space.

    Args:
        box: Parent's outer box (logical units)
        style: Parent's resolved style
        child_styles: Resolved styles of the children, in declared order

    Returns:
        One Rect per child, in declared order
    """
    content = content_box(box, style)
    if style.direction == StackDirection.VERTICAL:
        remaining_main = content.height - stacked_extent(style, child_styles)
        cursor = aligned_offset(style.vertical_align, remaining_main, 0.0)
    else:
        remaining_main = content.width - stacked_extent(style, child_styles)
        cursor = aligned_offset(style.align, remaining_main, 0.0)

    boxes: List[Rect] = []
    for child in child_styles:
        if style.direction == StackDirection.VERTICAL:
            x = content.x + aligned_offset(child.align, content.width, child.width)
            y = content.y + cursor
            cursor += child.height + style.spacing
        else:
            x = content.x + cursor
            y = content.y + aligned_offset(child.vertical_align, content.height, child.height)
            cursor += child.width + style.spacing
        boxes.append(Rect(x=x, y=y, width=child.width, height=child.height))

    return boxes
