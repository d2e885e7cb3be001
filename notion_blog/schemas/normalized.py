"""Internal data model handed to the site renderer.

Attributes are snake_case; ``model_dump(by_alias=True)`` yields the stable
PascalCase field names (``PageId``, ``FeaturedImage``, ...). Optional fields are
always present and explicitly ``None``.
"""

from typing import Any, Dict, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_pascal


class NormalizedModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True, frozen=True)


class SelectProperty(BaseModel):
    """A select option, used for tags and status. Field names follow Notion's."""

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    name: str
    color: Optional[str] = None


class FileObject(NormalizedModel):
    type: str
    url: str
    expiry_time: Optional[str] = None


class Emoji(NormalizedModel):
    type: Literal["emoji"] = "emoji"
    emoji: str


Icon = Union[Emoji, FileObject]


class Annotation(NormalizedModel):
    bold: bool = False
    italic: bool = False
    strikethrough: bool = False
    underline: bool = False
    code: bool = False
    color: str = "default"


class RichText(NormalizedModel):
    plain_text: str = ""
    href: Optional[str] = None
    annotation: Annotation = Field(default_factory=Annotation)


class Post(NormalizedModel):
    """A published blog entry."""

    page_id: str
    title: str = ""
    slug: str = ""
    date: str = ""
    last_updated_date: str = ""
    excerpt: str = ""
    tags: Tuple[SelectProperty, ...] = ()
    status: Optional[SelectProperty] = None
    featured_image: Optional[FileObject] = None
    rank: Union[int, float] = 0  # Notion numbers may be fractional


class Database(NormalizedModel):
    """Blog database metadata: site title, description, icon and cover."""

    title: str = ""
    description: str = ""
    icon: Optional[Icon] = None
    cover: Optional[FileObject] = None


# ---------------------------------------------------------------------------
# Block payloads
# ---------------------------------------------------------------------------
class Paragraph(NormalizedModel):
    rich_texts: Tuple[RichText, ...] = ()
    color: str = "default"


class Heading(NormalizedModel):
    rich_texts: Tuple[RichText, ...] = ()
    color: str = "default"
    is_toggleable: bool = False


class ListItem(NormalizedModel):
    rich_texts: Tuple[RichText, ...] = ()
    color: str = "default"


class ToDo(NormalizedModel):
    rich_texts: Tuple[RichText, ...] = ()
    checked: bool = False
    color: str = "default"


class Callout(NormalizedModel):
    rich_texts: Tuple[RichText, ...] = ()
    icon: Optional[Icon] = None
    color: str = "default"


class Code(NormalizedModel):
    rich_texts: Tuple[RichText, ...] = ()
    caption: Tuple[RichText, ...] = ()
    language: str = ""


class Media(NormalizedModel):
    """Image, video, file or pdf. Only the URL is kept; nothing is downloaded."""

    type: str = ""
    url: str = ""
    expiry_time: Optional[str] = None
    caption: Tuple[RichText, ...] = ()


class Link(NormalizedModel):
    url: str = ""
    caption: Tuple[RichText, ...] = ()


class Equation(NormalizedModel):
    expression: str = ""


class Table(NormalizedModel):
    table_width: int = 0
    has_column_header: bool = False
    has_row_header: bool = False


class TableRow(NormalizedModel):
    cells: Tuple[Tuple[RichText, ...], ...] = ()


# ---------------------------------------------------------------------------
# Block variants
# ---------------------------------------------------------------------------
class Block(NormalizedModel):
    id: str
    type: str
    has_children: bool = False


class ParagraphBlock(Block):
    type: Literal["paragraph"] = "paragraph"
    paragraph: Paragraph


class Heading1Block(Block):
    type: Literal["heading_1"] = "heading_1"
    heading_1: Heading


class Heading2Block(Block):
    type: Literal["heading_2"] = "heading_2"
    heading_2: Heading


class Heading3Block(Block):
    type: Literal["heading_3"] = "heading_3"
    heading_3: Heading


class BulletedListItemBlock(Block):
    type: Literal["bulleted_list_item"] = "bulleted_list_item"
    bulleted_list_item: ListItem


class NumberedListItemBlock(Block):
    type: Literal["numbered_list_item"] = "numbered_list_item"
    numbered_list_item: ListItem


class QuoteBlock(Block):
    type: Literal["quote"] = "quote"
    quote: Paragraph


class ToggleBlock(Block):
    type: Literal["toggle"] = "toggle"
    toggle: Paragraph


class ToDoBlock(Block):
    type: Literal["to_do"] = "to_do"
    to_do: ToDo


class CalloutBlock(Block):
    type: Literal["callout"] = "callout"
    callout: Callout


class CodeBlock(Block):
    type: Literal["code"] = "code"
    code: Code


class ImageBlock(Block):
    type: Literal["image"] = "image"
    image: Media


class VideoBlock(Block):
    type: Literal["video"] = "video"
    video: Media


class FileBlock(Block):
    type: Literal["file"] = "file"
    file: Media


class PdfBlock(Block):
    type: Literal["pdf"] = "pdf"
    pdf: Media


class BookmarkBlock(Block):
    type: Literal["bookmark"] = "bookmark"
    bookmark: Link


class EmbedBlock(Block):
    type: Literal["embed"] = "embed"
    embed: Link


class LinkPreviewBlock(Block):
    type: Literal["link_preview"] = "link_preview"
    link_preview: Link


class EquationBlock(Block):
    type: Literal["equation"] = "equation"
    equation: Equation


class TableBlock(Block):
    type: Literal["table"] = "table"
    table: Table


class TableRowBlock(Block):
    type: Literal["table_row"] = "table_row"
    table_row: TableRow


class LayoutBlock(Block):
    """Blocks with no payload of their own."""

    type: Literal["divider", "table_of_contents", "breadcrumb", "column_list", "column"]


class UnknownBlock(Block):
    """Any block type without a dedicated variant; keeps the raw payload."""

    raw: Dict[str, Any] = Field(default_factory=dict)


AnyBlock = Union[
    ParagraphBlock,
    Heading1Block,
    Heading2Block,
    Heading3Block,
    BulletedListItemBlock,
    NumberedListItemBlock,
    QuoteBlock,
    ToggleBlock,
    ToDoBlock,
    CalloutBlock,
    CodeBlock,
    ImageBlock,
    VideoBlock,
    FileBlock,
    PdfBlock,
    BookmarkBlock,
    EmbedBlock,
    LinkPreviewBlock,
    EquationBlock,
    TableBlock,
    TableRowBlock,
    LayoutBlock,
    UnknownBlock,
]
