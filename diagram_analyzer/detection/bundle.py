"""
Processed file bundles.

A bundle is what the upstream format extractors hand to the aggregator: the
file format, a little metadata and whatever text or structure the extractor
managed to pull out. Nothing here assumes any particular shape is present.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

STRUCTURAL_TEXT_FIELDS = ("text", "label", "value", "name", "masterName", "style")
DRAWIO_TEXT_FIELDS = ("text", "label", "value", "style")
VISIO_TEXT_FIELDS = ("text", "name", "masterName")


class FileFormat(str, Enum):
    """Source format of an uploaded diagram."""

    PNG = "png"
    JPG = "jpg"
    JPEG = "jpeg"
    GIF = "gif"
    SVG = "svg"
    WEBP = "webp"
    DRAWIO = "drawio"
    VSDX = "vsdx"
    PDF = "pdf"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> "FileFormat":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower().lstrip("."))
        except ValueError:
            return cls.UNKNOWN


def _pick(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


@dataclass
class FileMetadata:
    original_name: str = ""
    size: int = 0
    mime_type: Optional[str] = None
    pages: Optional[int] = None
    width: Optional[float] = None
    height: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "FileMetadata":
        data = data or {}
        dimensions = data.get("dimensions") or {}
        return cls(
            original_name=str(_pick(data, "originalName", "original_name") or ""),
            size=int(data.get("size") or 0),
            mime_type=_pick(data, "mimeType", "mime_type"),
            pages=data.get("pages"),
            width=dimensions.get("width"),
            height=dimensions.get("height"),
        )


@dataclass
class ProcessedFileBundle:
    """Normalized extractor output consumed by the aggregator."""

    format: FileFormat = FileFormat.UNKNOWN
    metadata: FileMetadata = field(default_factory=FileMetadata)
    extracted_data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ProcessedFileBundle":
        """Build a bundle from JSON, accepting camelCase or snake_case keys."""
        extracted = _pick(data, "extractedData", "extracted_data") or {}
        if not isinstance(extracted, dict):
            extracted = {}
        else:
            extracted = dict(extracted)
            if "textContent" in extracted and "text_content" not in extracted:
                extracted["text_content"] = extracted.pop("textContent")
        return cls(
            format=FileFormat.parse(data.get("format", "unknown")),
            metadata=FileMetadata.from_dict(data.get("metadata")),
            extracted_data=extracted,
        )

    @property
    def original_name(self) -> str:
        return self.metadata.original_name

    @property
    def elements(self) -> List[Dict[str, Any]]:
        return _dict_items(self.extracted_data.get("elements"))

    @property
    def shapes(self) -> List[Dict[str, Any]]:
        return _dict_items(self.extracted_data.get("shapes"))

    def structural_elements(self) -> List[Dict[str, Any]]:
        """Draw.io elements followed by Visio shapes."""
        return self.elements + self.shapes

    def extract_text(self) -> str:
        """Text blob for the text pass; falls back to the filename."""
        if self.format is FileFormat.DRAWIO and self.elements:
            return _join_fields(self.elements, DRAWIO_TEXT_FIELDS)
        if self.format is FileFormat.VSDX and self.shapes:
            return _join_fields(self.shapes, VISIO_TEXT_FIELDS)
        if self.format is FileFormat.PDF and self.extracted_data.get("text"):
            return str(self.extracted_data["text"])
        if self.format is FileFormat.SVG and self.extracted_data.get("text_content"):
            return " ".join(str(t) for t in self.extracted_data["text_content"])
        return self.original_name


def element_text(element: Mapping[str, Any]) -> str:
    """Concatenate the text-bearing fields of one structural element."""
    return " ".join(
        str(element[key]) for key in STRUCTURAL_TEXT_FIELDS if element.get(key)
    )


def _join_fields(items: List[Dict[str, Any]], fields: tuple) -> str:
    # Every non-empty field of every item, in field order
    return " ".join(
        str(item[key]) for item in items for key in fields if item.get(key)
    )


def _dict_items(value: Any) -> List[Dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]
