"""Normalization of raw Notion records into the internal data model.

Missing optional fields map to documented defaults (``""``, ``()``, ``0`` or
``None``). Only a missing identifier is an error, and it fails the whole batch
rather than dropping the record.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Type, Union

from pydantic import BaseModel, ValidationError

from notion_blog.core.errors import NormalizationError
from notion_blog.core.logging import get_logger
from notion_blog.schemas import normalized as n
from notion_blog.schemas.raw import (
    RawBlock,
    RawBlockPayload,
    RawDateProperty,
    RawDatabase,
    RawFile,
    RawFilesProperty,
    RawPage,
    RawRichText,
    RawSelectOption,
    RawSelectProperty,
)

log = get_logger("normalizer")


def _validate(model: Type[BaseModel], raw: Any, what: str) -> Any:
    try:
        return model.model_validate(raw)
    except ValidationError as exc:
        raise NormalizationError(
            f"Malformed {what}",
            details={"errors": exc.errors(include_url=False)},
        ) from exc


# -----------------------------------------------------------------------------
# Field rules
# -----------------------------------------------------------------------------
def join_plain_text(fragments: Optional[Iterable[RawRichText]]) -> str:
    """Concatenate the plain text of rich-text fragments in order."""
    if not fragments:
        return ""
    return "".join(fragment.plain_text or "" for fragment in fragments)


def build_rich_text(fragments: Optional[Iterable[RawRichText]]) -> Tuple[n.RichText, ...]:
    if not fragments:
        return ()
    result = []
    for fragment in fragments:
        annotations = fragment.annotations
        result.append(
            n.RichText(
                plain_text=fragment.plain_text or "",
                href=fragment.href,
                annotation=n.Annotation(**annotations.model_dump()) if annotations else n.Annotation(),
            )
        )
    return tuple(result)


def _select(option: Optional[RawSelectOption]) -> Optional[n.SelectProperty]:
    if option is None or option.name is None:
        return None
    return n.SelectProperty(id=option.id, name=option.name, color=option.color)


def build_tags(prop: Optional[RawSelectProperty]) -> Tuple[n.SelectProperty, ...]:
    """Single-select becomes a one-element tuple, multi-select is kept as is."""
    if prop is None:
        return ()
    single = _select(prop.select)
    if single is not None:
        return (single,)
    if prop.multi_select is not None:
        return tuple(tag for tag in map(_select, prop.multi_select) if tag is not None)
    return ()


def _date_start(prop: Optional[RawDateProperty]) -> str:
    if prop is None or prop.date is None:
        return ""
    return prop.date.start or ""


def build_file(raw: Optional[RawFile], type_: Optional[str] = None) -> Optional[n.FileObject]:
    """External URL wins over an internal one; internal files carry an expiry."""
    if raw is None:
        return None
    file_type = type_ or raw.type or ""
    if raw.external is not None and raw.external.url:
        return n.FileObject(type=file_type, url=raw.external.url)
    if raw.file is not None:
        return n.FileObject(type=file_type, url=raw.file.url or "", expiry_time=raw.file.expiry_time)
    return n.FileObject(type=file_type, url="")


def build_featured_image(prop: Optional[RawFilesProperty]) -> Optional[n.FileObject]:
    if prop is None or not prop.files:
        return None
    return build_file(prop.files[0], prop.type)


def build_icon(raw: Optional[RawFile]) -> Optional[n.Icon]:
    if raw is None:
        return None
    if raw.type == "emoji":
        return n.Emoji(emoji=raw.emoji or "")
    if raw.type == "custom_emoji":
        return n.FileObject(type=raw.type, url=(raw.custom_emoji.url if raw.custom_emoji else None) or "")
    return build_file(raw)


def _rank(number: Optional[float]) -> Union[int, float]:
    """Absent rank is 0; whole numbers become ints, fractions are kept."""
    if not number:
        return 0
    return int(number) if number.is_integer() else number


# -----------------------------------------------------------------------------
# Records
# -----------------------------------------------------------------------------
def build_post(raw: Dict[str, Any]) -> n.Post:
    page: RawPage = _validate(RawPage, raw, "page")
    if not page.id:
        raise NormalizationError("Page is missing its id", details={"object": page.object})

    prop = page.properties
    if prop is None:
        return n.Post(page_id=page.id)

    rank = prop.Rank.number if prop.Rank is not None else None
    status = prop.Status.select if prop.Status is not None else None
    return n.Post(
        page_id=page.id,
        title=join_plain_text(prop.Page.title if prop.Page else None),
        slug=join_plain_text(prop.Slug.rich_text if prop.Slug else None),
        date=_date_start(prop.Date),
        last_updated_date=_date_start(prop.LastUpdatedDate),
        excerpt=join_plain_text(prop.Excerpt.rich_text if prop.Excerpt else None),
        tags=build_tags(prop.Category),
        status=_select(status),
        featured_image=build_featured_image(prop.FeaturedImage),
        rank=_rank(rank),
    )


def build_posts(raws: Iterable[Dict[str, Any]]) -> List[n.Post]:
    """Normalize a drained batch; the first bad record fails the batch."""
    posts = []
    for index, raw in enumerate(raws):
        try:
            posts.append(build_post(raw))
        except NormalizationError as exc:
            exc.details.setdefault("index", index)
            log.error(f"Cannot normalize page at index {index}: {exc.message}")
            raise
    return posts


def build_database(raw: Dict[str, Any]) -> n.Database:
    db: RawDatabase = _validate(RawDatabase, raw, "database")
    return n.Database(
        title=join_plain_text(db.title),
        description=join_plain_text(db.description),
        icon=build_icon(db.icon),
        cover=build_file(db.cover),
    )


# -----------------------------------------------------------------------------
# Blocks
# -----------------------------------------------------------------------------
def _paragraph(p: RawBlockPayload) -> n.Paragraph:
    return n.Paragraph(rich_texts=build_rich_text(p.rich_text), color=p.color or "default")


def _heading(p: RawBlockPayload) -> n.Heading:
    return n.Heading(
        rich_texts=build_rich_text(p.rich_text),
        color=p.color or "default",
        is_toggleable=bool(p.is_toggleable),
    )


def _list_item(p: RawBlockPayload) -> n.ListItem:
    return n.ListItem(rich_texts=build_rich_text(p.rich_text), color=p.color or "default")


def _to_do(p: RawBlockPayload) -> n.ToDo:
    return n.ToDo(rich_texts=build_rich_text(p.rich_text), checked=bool(p.checked), color=p.color or "default")


def _callout(p: RawBlockPayload) -> n.Callout:
    return n.Callout(rich_texts=build_rich_text(p.rich_text), icon=build_icon(p.icon), color=p.color or "default")


def _code(p: RawBlockPayload) -> n.Code:
    return n.Code(rich_texts=build_rich_text(p.rich_text), caption=build_rich_text(p.caption), language=p.language or "")


def _media(p: RawBlockPayload) -> n.Media:
    source = build_file(RawFile(type=p.type, external=p.external, file=p.file))
    return n.Media(
        type=source.type,
        url=source.url,
        expiry_time=source.expiry_time,
        caption=build_rich_text(p.caption),
    )


def _link(p: RawBlockPayload) -> n.Link:
    return n.Link(url=p.url or "", caption=build_rich_text(p.caption))


def _equation(p: RawBlockPayload) -> n.Equation:
    return n.Equation(expression=p.expression or "")


def _table(p: RawBlockPayload) -> n.Table:
    return n.Table(
        table_width=p.table_width or 0,
        has_column_header=bool(p.has_column_header),
        has_row_header=bool(p.has_row_header),
    )


def _table_row(p: RawBlockPayload) -> n.TableRow:
    return n.TableRow(cells=tuple(build_rich_text(cell) for cell in p.cells or ()))


# block type -> (variant class, payload builder)
BLOCK_BUILDERS: Dict[str, Tuple[Type[n.Block], Callable[[RawBlockPayload], BaseModel]]] = {
    "paragraph": (n.ParagraphBlock, _paragraph),
    "heading_1": (n.Heading1Block, _heading),
    "heading_2": (n.Heading2Block, _heading),
    "heading_3": (n.Heading3Block, _heading),
    "bulleted_list_item": (n.BulletedListItemBlock, _list_item),
    "numbered_list_item": (n.NumberedListItemBlock, _list_item),
    "quote": (n.QuoteBlock, _paragraph),
    "toggle": (n.ToggleBlock, _paragraph),
    "to_do": (n.ToDoBlock, _to_do),
    "callout": (n.CalloutBlock, _callout),
    "code": (n.CodeBlock, _code),
    "image": (n.ImageBlock, _media),
    "video": (n.VideoBlock, _media),
    "file": (n.FileBlock, _media),
    "pdf": (n.PdfBlock, _media),
    "bookmark": (n.BookmarkBlock, _link),
    "embed": (n.EmbedBlock, _link),
    "link_preview": (n.LinkPreviewBlock, _link),
    "equation": (n.EquationBlock, _equation),
    "table": (n.TableBlock, _table),
    "table_row": (n.TableRowBlock, _table_row),
}

LAYOUT_BLOCK_TYPES = {"divider", "table_of_contents", "breadcrumb", "column_list", "column"}


def build_block(raw: Dict[str, Any]) -> n.AnyBlock:
    block: RawBlock = _validate(RawBlock, raw, "block")
    if not block.id or not block.type:
        raise NormalizationError("Block is missing its id or type", details={"id": block.id, "type": block.type})

    common = {"id": block.id, "has_children": bool(block.has_children)}
    if block.type in LAYOUT_BLOCK_TYPES:
        return n.LayoutBlock(type=block.type, **common)

    builder = BLOCK_BUILDERS.get(block.type)
    if builder is None:
        return n.UnknownBlock(type=block.type, raw=block.payload(), **common)

    variant, build_payload = builder
    payload = _validate(RawBlockPayload, block.payload(), f"{block.type} block")
    return variant(**common, **{block.type: build_payload(payload)})


def build_blocks(raws: Iterable[Dict[str, Any]]) -> List[n.AnyBlock]:
    return [build_block(raw) for raw in raws]
