"""
Document Parser
===============

Parses JSON or YAML documents that describe a component tree into validated
DSLDocument models. Structural rules are checked with Cerberus schemas,
value rules with the Pydantic models.
"""

from typing import Dict, List, Any, Optional
import json
import time
from abc import ABC, abstractmethod

import yaml  # type: ignore[import-untyped]
from cerberus import Validator  # type: ignore[import-untyped]
from pydantic import ValidationError

from pixeltree.config.logging import get_logger
from pixeltree.config.settings import get_settings
from pixeltree.models.schemas import ComponentKind, DSLDocument, ImageFit, ParseResult
from pixeltree.models.style import Alignment, StackDirection

logger = get_logger(__name__)


class DSLParseError(Exception):
    """Exception raised when a document cannot be parsed."""

    pass


class DSLValidator:
    """Structural document validation using Cerberus schemas."""

    def __init__(self) -> None:
        self.logger: Any = logger.bind(component="validator")
        self._setup_schemas()

    def _setup_schemas(self) -> None:
        """Setup validation schemas."""
        alignments = [a.value for a in Alignment]

        # Component style schema
        self.style_schema = {
            "width": {"type": "number", "min": 0},
            "height": {"type": "number", "min": 0},
            "padding": {"type": ["number", "list", "dict"]},
            "direction": {"type": "string", "allowed": [d.value for d in StackDirection]},
            "spacing": {"type": "number", "min": 0},
            "align": {"type": "string", "allowed": alignments},
            "verticalAlign": {"type": "string", "allowed": alignments},
            "vertical_align": {"type": "string", "allowed": alignments},
            "background": {"type": "string"},
            "color": {"type": "string"},
            "fontSize": {"type": "number", "min": 1},
            "font_size": {"type": "number", "min": 1},
            "fontFamily": {"type": "string", "empty": False},
            "font_family": {"type": "string", "empty": False},
            "opacity": {"type": "number", "min": 0.0, "max": 1.0},
        }

        # Element schema; children are validated recursively by _validate_element
        self.element_schema: Dict[str, Any] = {
            "type": {"type": "string", "required": True, "allowed": [k.value for k in ComponentKind]},
            "id": {"type": "string", "nullable": True},
            "style": {
                "type": "dict",
                "schema": self.style_schema,
                "allow_unknown": False,
                "nullable": True,
            },
            "text": {"type": "string", "nullable": True},
            "src": {"type": "string", "nullable": True, "empty": False},
            "fit": {"type": "string", "allowed": [f.value for f in ImageFit]},
            "fill": {"type": "string", "nullable": True},
            "radius": {"type": "number", "min": 0},
            "children": {"type": "list", "schema": {"type": "dict"}},
        }

        # Document schema
        self.document_schema: Dict[str, Any] = {
            "title": {"type": "string", "nullable": True},
            "width": {"type": "integer", "min": 1, "default": 800},
            "height": {"type": "integer", "min": 1, "default": 600},
            "scale": {"type": "number", "min": 0.01},
            "background": {"type": "string", "nullable": True},
            "root": {"type": "dict", "required": True},
            "metadata": {"type": "dict", "default": {}},
            "version": {"type": "string", "default": "1.0"},
        }

    def validate_document(self, data: Dict[str, Any]) -> tuple[bool, List[str], List[str]]:
        """
        Validate document structure.

        Args:
            data: Document data to validate

        Returns:
            Tuple of (is_valid, errors, warnings)
        """
        validator = Validator(self.document_schema)
        validator.allow_unknown = True  # Allow extra top-level fields

        is_valid = validator.validate(data)
        errors: List[str] = []
        warnings: List[str] = []

        if not is_valid:
            errors.extend(self._format_validation_errors(validator.errors))

        # Additional custom validations
        custom_errors, custom_warnings = self._perform_custom_validations(data)
        errors.extend(custom_errors)
        warnings.extend(custom_warnings)

        return is_valid and len(custom_errors) == 0, errors, warnings

    def _format_validation_errors(self, errors: Any, path: str = "") -> List[str]:
        """Format Cerberus validation errors into readable messages."""
        formatted_errors: List[str] = []

        for field, error_info in errors.items():
            current_path = f"{path}.{field}" if path else str(field)

            if isinstance(error_info, list):
                for error in error_info:
                    if isinstance(error, dict):
                        formatted_errors.extend(self._format_validation_errors(error, current_path))
                    else:
                        formatted_errors.append(f"{current_path}: {error}")
            elif isinstance(error_info, dict):
                formatted_errors.extend(self._format_validation_errors(error_info, current_path))

        return formatted_errors

    def _perform_custom_validations(self, data: Dict[str, Any]) -> tuple[List[str], List[str]]:
        """Perform custom validation logic."""
        errors: List[str] = []
        warnings: List[str] = []

        root = data.get("root")
        if isinstance(root, dict):
            root_errors, root_warnings = self._validate_element(root, "root")
            errors.extend(root_errors)
            warnings.extend(root_warnings)

        # Check for reasonable canvas size
        settings = get_settings()
        width = data.get("width", settings.default_width)
        height = data.get("height", settings.default_height)
        scale = data.get("scale", 1.0)

        if isinstance(width, (int, float)) and isinstance(height, (int, float)):
            if isinstance(scale, (int, float)) and scale > 0:
                if width * scale > settings.max_width or height * scale > settings.max_height:
                    warnings.append(
                        f"Large output size ({round(width * scale)}x{round(height * scale)}) "
                        "may impact performance"
                    )

        return errors, warnings

    def _validate_element(self, element: Any, path: str) -> tuple[List[str], List[str]]:
        """Validate an element and its children recursively."""
        errors: List[str] = []
        warnings: List[str] = []

        if not isinstance(element, dict):
            errors.append(
                f"{path}: Element must be a dictionary/object, got {type(element).__name__}"
            )
            return errors, warnings

        validator = Validator(self.element_schema)
        validator.allow_unknown = True
        if not validator.validate(element):
            errors.extend(self._format_validation_errors(validator.errors, path))
            return errors, warnings

        element_type = element.get("type")
        children = element.get("children") or []

        if children and element_type != ComponentKind.CONTAINER.value:
            errors.append(f"{path}: Element type '{element_type}' cannot have children")

        for i, child in enumerate(children):
            child_errors, child_warnings = self._validate_element(child, f"{path}.children[{i}]")
            errors.extend(child_errors)
            warnings.extend(child_warnings)

        # Check for required content based on element type
        if element_type == ComponentKind.IMAGE.value and not element.get("src"):
            errors.append(f"{path}: Image element must have 'src' property")

        if element_type == ComponentKind.TEXT.value and element.get("text") is None:
            errors.append(f"{path}: Text element must have 'text' property")

        if element_type == ComponentKind.CONTAINER.value and not children:
            warnings.append(f"{path}: Container has no children")

        if element_type in (ComponentKind.RECT.value, ComponentKind.ELLIPSE.value):
            style = element.get("style") or {}
            if style.get("width") is None or style.get("height") is None:
                warnings.append(f"{path}: Shapes need an explicit width and height")

        return errors, warnings


def format_model_errors(error: ValidationError) -> List[str]:
    """Format Pydantic validation errors as ``path: message`` strings."""
    formatted: List[str] = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"])
        formatted.append(f"{location}: {item['msg']}")
    return formatted


class BaseDSLParser(ABC):
    """Abstract base class for document parsers."""

    def __init__(self) -> None:
        self.validator = DSLValidator()

    @abstractmethod
    def load(self, content: str) -> Any:
        """Decode raw content into Python data."""
        pass

    @abstractmethod
    async def validate_syntax(self, content: str) -> bool:
        """Validate syntax without full parsing."""
        pass

    async def parse(self, content: str) -> ParseResult:
        """
        Parse content into a structured DSLDocument.

        Args:
            content: Raw document content as string

        Returns:
            ParseResult containing parsed document or errors
        """
        start_time = time.time()

        try:
            raw_data = self.load(content)
        except DSLParseError as e:
            self.logger.error("Document parsing failed", error=str(e))
            return ParseResult(
                success=False,
                document=None,
                errors=[str(e)],
                processing_time=time.time() - start_time,
            )

        if not isinstance(raw_data, dict):
            return ParseResult(
                success=False,
                document=None,
                errors=[f"Document must be a dictionary/object, got {type(raw_data).__name__}"],
                processing_time=time.time() - start_time,
            )

        is_valid, errors, warnings = self.validator.validate_document(raw_data)
        self.logger.debug(
            "Document validation",
            is_valid=is_valid,
            error_count=len(errors),
            warning_count=len(warnings),
        )

        if not is_valid:
            return ParseResult(
                success=False,
                document=None,
                errors=errors,
                warnings=warnings,
                processing_time=time.time() - start_time,
            )

        try:
            document = DSLDocument.model_validate(raw_data)
        except ValidationError as e:
            errors = format_model_errors(e)
            self.logger.error("Document model validation failed", errors=errors)
            return ParseResult(
                success=False,
                document=None,
                errors=errors,
                warnings=warnings,
                processing_time=time.time() - start_time,
            )

        return ParseResult(
            success=True,
            document=document,
            errors=[],
            warnings=warnings,
            processing_time=time.time() - start_time,
        )


class JSONDSLParser(BaseDSLParser):
    """JSON document parser implementation."""

    def __init__(self) -> None:
        super().__init__()
        self.logger: Any = logger.bind(parser="json")

    def load(self, content: str) -> Any:
        self.logger.info("Parsing JSON document")
        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise DSLParseError(
                f"Invalid JSON syntax at line {e.lineno}, column {e.colno}: {e.msg}"
            ) from e

    async def validate_syntax(self, content: str) -> bool:
        try:
            json.loads(content)
            return True
        except json.JSONDecodeError:
            return False


class YAMLDSLParser(BaseDSLParser):
    """YAML document parser implementation."""

    def __init__(self) -> None:
        super().__init__()
        self.logger: Any = logger.bind(parser="yaml")

    def load(self, content: str) -> Any:
        self.logger.info("Parsing YAML document")
        try:
            raw_data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise DSLParseError(f"Invalid YAML syntax: {e}") from e
        if raw_data is None:
            raise DSLParseError("Empty YAML document")
        return raw_data

    async def validate_syntax(self, content: str) -> bool:
        try:
            yaml.safe_load(content)
            return True
        except yaml.YAMLError:
            return False


class DSLParserFactory:
    """Factory for creating document parsers based on content type."""

    _parsers = {
        "json": JSONDSLParser,
        "yaml": YAMLDSLParser,
    }

    @classmethod
    def create_parser(cls, parser_type: str) -> BaseDSLParser:
        """
        Create a parser instance.

        Args:
            parser_type: Type of parser ("json", "yaml")

        Raises:
            ValueError: If parser type is not supported
        """
        if parser_type not in cls._parsers:
            raise ValueError(f"Unsupported parser type: {parser_type}")

        return cls._parsers[parser_type]()

    @classmethod
    def detect_parser_type(cls, content: str) -> str:
        """Detect parser type from content."""
        content = content.strip()
        if content.startswith(("{", "[")):
            return "json"
        elif content.startswith("---"):
            return "yaml"
        else:
            # Try to parse as JSON first, fallback to YAML
            try:
                json.loads(content)
                return "json"
            except json.JSONDecodeError:
                return "yaml"


async def parse_document(content: str, parser_type: Optional[str] = None) -> ParseResult:
    """
    Parse document content using the appropriate parser.

    Args:
        content: Raw document content
        parser_type: Optional parser type override

    Returns:
        ParseResult containing parsed document or errors
    """
    if not content or not content.strip():
        return ParseResult(
            success=False, document=None, errors=["Empty document content provided"], processing_time=0.0
        )

    if not parser_type:
        parser_type = DSLParserFactory.detect_parser_type(content)

    try:
        parser = DSLParserFactory.create_parser(parser_type)
    except ValueError as e:
        return ParseResult(success=False, document=None, errors=[str(e)], processing_time=0.0)
    return await parser.parse(content)


async def validate_document_syntax(content: str, parser_type: Optional[str] = None) -> bool:
    """Validate document syntax without full parsing."""
    if not content or not content.strip():
        return False

    if not parser_type:
        parser_type = DSLParserFactory.detect_parser_type(content)

    try:
        parser = DSLParserFactory.create_parser(parser_type)
    except ValueError:
        return False
    return await parser.validate_syntax(content)


def get_supported_component_types() -> List[str]:
    """Get list of supported component kinds."""
    return [k.value for k in ComponentKind]
