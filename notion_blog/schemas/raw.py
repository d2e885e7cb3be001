"""Raw Notion API shapes.

Every field the API may omit is ``Optional`` with a ``None`` default, so the
normalizer decides each fallback explicitly instead of guarding attribute
access. Unknown keys are ignored.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict


class RawModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class RawAnnotations(RawModel):
    bold: bool = False
    italic: bool = False
    strikethrough: bool = False
    underline: bool = False
    code: bool = False
    color: str = "default"


class RawRichText(RawModel):
    type: Optional[str] = None
    plain_text: Optional[str] = None
    href: Optional[str] = None
    annotations: Optional[RawAnnotations] = None


class RawSelectOption(RawModel):
    id: Optional[str] = None
    name: Optional[str] = None
    color: Optional[str] = None


class RawDate(RawModel):
    start: Optional[str] = None
    end: Optional[str] = None


class RawExternal(RawModel):
    url: Optional[str] = None


class RawInternalFile(RawModel):
    url: Optional[str] = None
    expiry_time: Optional[str] = None


class RawFile(RawModel):
    """An entry of a ``files`` property, or an icon/cover/media object."""

    type: Optional[str] = None
    name: Optional[str] = None
    emoji: Optional[str] = None
    custom_emoji: Optional[RawExternal] = None
    external: Optional[RawExternal] = None
    file: Optional[RawInternalFile] = None


# ---------------------------------------------------------------------------
# Page properties
# ---------------------------------------------------------------------------
class RawTitleProperty(RawModel):
    type: Optional[str] = None
    title: Optional[List[RawRichText]] = None


class RawRichTextProperty(RawModel):
    type: Optional[str] = None
    rich_text: Optional[List[RawRichText]] = None


class RawDateProperty(RawModel):
    type: Optional[str] = None
    date: Optional[RawDate] = None


class RawSelectProperty(RawModel):
    """Either a ``select`` or a ``multi_select`` property."""

    type: Optional[str] = None
    select: Optional[RawSelectOption] = None
    multi_select: Optional[List[RawSelectOption]] = None


class RawNumberProperty(RawModel):
    type: Optional[str] = None
    number: Optional[float] = None


class RawFilesProperty(RawModel):
    type: Optional[str] = None
    files: Optional[List[RawFile]] = None


class RawCheckboxProperty(RawModel):
    type: Optional[str] = None
    checkbox: Optional[bool] = None


class RawPageProperties(RawModel):
    """The blog database columns the client reads."""

    Page: Optional[RawTitleProperty] = None
    Slug: Optional[RawRichTextProperty] = None
    Date: Optional[RawDateProperty] = None
    LastUpdatedDate: Optional[RawDateProperty] = None
    Excerpt: Optional[RawRichTextProperty] = None
    Category: Optional[RawSelectProperty] = None
    Status: Optional[RawSelectProperty] = None
    FeaturedImage: Optional[RawFilesProperty] = None
    Rank: Optional[RawNumberProperty] = None
    Published: Optional[RawCheckboxProperty] = None


class RawPage(RawModel):
    object: Optional[str] = None
    id: Optional[str] = None
    properties: Optional[RawPageProperties] = None


class RawDatabase(RawModel):
    object: Optional[str] = None
    id: Optional[str] = None
    title: Optional[List[RawRichText]] = None
    description: Optional[List[RawRichText]] = None
    icon: Optional[RawFile] = None
    cover: Optional[RawFile] = None


# ---------------------------------------------------------------------------
# Blocks
# ---------------------------------------------------------------------------
class RawBlockPayload(RawModel):
    """Union of the payload fields used by the supported block types."""

    rich_text: Optional[List[RawRichText]] = None
    color: Optional[str] = None
    is_toggleable: Optional[bool] = None
    checked: Optional[bool] = None
    language: Optional[str] = None
    caption: Optional[List[RawRichText]] = None
    icon: Optional[RawFile] = None
    url: Optional[str] = None
    expression: Optional[str] = None
    type: Optional[str] = None
    external: Optional[RawExternal] = None
    file: Optional[RawInternalFile] = None
    table_width: Optional[int] = None
    has_column_header: Optional[bool] = None
    has_row_header: Optional[bool] = None
    cells: Optional[List[List[RawRichText]]] = None


class RawBlock(RawModel):
    """A block object; the payload lives under the key named by ``type``."""

    model_config = ConfigDict(extra="allow")

    object: Optional[str] = None
    id: Optional[str] = None
    type: Optional[str] = None
    has_children: Optional[bool] = None

    def payload(self) -> Dict[str, Any]:
        extra = self.model_extra or {}
        value = extra.get(self.type or "")
        return value if isinstance(value, dict) else {}


# ---------------------------------------------------------------------------
# List envelope
# ---------------------------------------------------------------------------
class RawListResponse(RawModel):
    """Envelope of ``databases.query`` and ``blocks.children.list``."""

    object: Optional[str] = None
    results: List[Dict[str, Any]]
    has_more: bool = False
    next_cursor: Optional[str] = None
