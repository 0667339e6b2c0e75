"""
Renderer
========

High-level entry points: pre-load resources concurrently, then run the
purely computational draw pass, then export.
"""

from typing import Any, List, Optional
import asyncio
import time

from pixeltree.config.logging import get_logger
from pixeltree.config.settings import get_settings
from pixeltree.core.components.base import Component
from pixeltree.core.dsl.builder import build_tree
from pixeltree.core.dsl.parser import parse_document
from pixeltree.core.errors import RenderError
from pixeltree.core.rendering.canvas import Canvas
from pixeltree.core.rendering.context import RenderContext
from pixeltree.core.rendering.exporter import ExportError, export_png
from pixeltree.core.rendering.pipeline import RenderPipeline, RenderReport
from pixeltree.core.rendering.resources import ResourceCache, ResourceLoader
from pixeltree.models.schemas import RenderOptions, RenderResponse

logger = get_logger(__name__)


class RenderResult:
    """Canvas and report of a successful pass."""

    def __init__(self, canvas: Canvas, report: RenderReport):
        self.canvas = canvas
        self.report = report


def collect_resources(root: Component) -> List[str]:
    """Every resource reference in the tree, in pre-order, without duplicates."""
    references = (ref for node in root.walk() for ref in node.resources())
    return list(dict.fromkeys(references))


def default_options() -> RenderOptions:
    settings = get_settings()
    return RenderOptions(
        width=settings.default_width,
        height=settings.default_height,
        scale_factor=settings.default_scale_factor,
    )


def check_limits(options: RenderOptions) -> None:
    """Reject options beyond the configured limits."""
    settings = get_settings()
    if options.scale_factor > settings.max_scale_factor:
        raise ValueError(
            f"Scale factor {options.scale_factor} exceeds maximum {settings.max_scale_factor}"
        )
    width, height = options.pixel_size
    if width > settings.max_width or height > settings.max_height:
        raise ValueError(
            f"Output size {width}x{height} exceeds maximum "
            f"{settings.max_width}x{settings.max_height}"
        )


async def render_tree(
    root: Component,
    options: Optional[RenderOptions] = None,
    loader: Optional[ResourceLoader] = None,
    resources: Optional[ResourceCache] = None,
    timeout: Optional[float] = None,
) -> RenderResult:
    """
    Render a component tree onto a new canvas.

    Args:
        root: Root component
        options: Canvas size, scale factor and background
        loader: Resource loader used when no cache is given
        resources: Pre-populated resource cache to reuse
        timeout: Seconds allowed for resource pre-loading

    Returns:
        RenderResult with the finished canvas

    Raises:
        RenderError: The first failure of the pass
        ValueError: If options exceed configured limits
        asyncio.TimeoutError: If pre-loading exceeds ``timeout``
    """
    options = options or default_options()
    check_limits(options)
    cache = resources or ResourceCache(loader)

    references = collect_resources(root)
    if timeout is not None:
        await asyncio.wait_for(cache.preload(references), timeout)
    else:
        await cache.preload(references)

    context = RenderContext(scale_factor=options.scale_factor, resources=cache)
    canvas = Canvas.for_scale(
        options.width,
        options.height,
        options.scale_factor,
        background=options.canvas_background,
        clip=options.clip,
    )
    report = RenderPipeline(canvas, context).run(root)
    return RenderResult(canvas=canvas, report=report)


async def render_document(
    content: str,
    options: Optional[RenderOptions] = None,
    loader: Optional[ResourceLoader] = None,
    parser_type: Optional[str] = None,
) -> RenderResponse:
    """
    Parse, build, render and export a document.

    Failures are reported in the response rather than raised; a failed
    response never carries image data.
    """
    start_time = time.time()
    log: Any = logger.bind(operation="render_document")

    parse_result = await parse_document(content, parser_type)
    if not parse_result.success or parse_result.document is None:
        return RenderResponse(
            success=False,
            error="; ".join(parse_result.errors),
            processing_time=time.time() - start_time,
        )

    document = parse_result.document
    options = options or document.render_options()

    try:
        root = build_tree(document)
        result = await render_tree(root, options, loader=loader)
        png_result = export_png(result.canvas, optimize=options.optimize_png)
    except RenderError as e:
        log.warning("Document render failed", error=str(e), kind=e.kind.value)
        return RenderResponse(
            success=False,
            error=str(e),
            error_kind=e.kind.value,
            processing_time=time.time() - start_time,
        )
    except (ValueError, ExportError) as e:
        log.warning("Document render failed", error=str(e))
        return RenderResponse(
            success=False,
            error=str(e),
            processing_time=time.time() - start_time,
        )

    return RenderResponse(
        success=True,
        png_result=png_result,
        nodes_drawn=result.report.node_count,
        processing_time=time.time() - start_time,
    )
