"""
Atlassian Document Format (ADF) conversion.

Rich text is read into, and written from, a small block model so that
extraction and construction stay symmetric:

    ADF dict -> adf_to_blocks -> [Block] -> blocks_to_text -> str
    str -> text_to_blocks -> [Block] -> blocks_to_adf -> ADF dict
"""

from dataclasses import dataclass
from typing import Any

BULLET_MARKERS = ("-", "•")


@dataclass(frozen=True)
class Paragraph:
    text: str


@dataclass(frozen=True)
class BulletList:
    items: tuple[str, ...]


@dataclass(frozen=True)
class OrderedList:
    items: tuple[str, ...]
    start: int = 1


@dataclass(frozen=True)
class CodeBlock:
    text: str


Block = Paragraph | BulletList | OrderedList | CodeBlock


def _inline_text(node: Any) -> str:
    """Concatenate the text runs below a node."""
    if not isinstance(node, dict):
        return ""

    node_type = node.get("type")
    if node_type == "text":
        return str(node.get("text", ""))
    if node_type == "hardBreak":
        return "\n"

    attrs = node.get("attrs") or {}
    if node_type == "mention":
        return str(attrs.get("text", ""))
    if node_type == "emoji":
        return str(attrs.get("text") or attrs.get("shortName", ""))
    if node_type in ("inlineCard", "blockCard"):
        return str(attrs.get("url", ""))

    children = node.get("content")
    if not isinstance(children, list):
        return ""

    if node_type in ("listItem", "blockquote", "panel"):
        parts = [_inline_text(child) for child in children]
        return " ".join(part for part in parts if part)
    return "".join(_inline_text(child) for child in children)


def _list_items(node: dict[str, Any]) -> tuple[str, ...]:
    items = []
    for child in node.get("content") or []:
        if isinstance(child, dict) and child.get("type") == "listItem":
            text = _inline_text(child).strip()
            if text:
                items.append(text)
    return tuple(items)


def adf_to_blocks(document: Any) -> list[Block]:
    """
    Read an ADF document into blocks.

    Plain strings (Server/Data Center responses) become a single paragraph.
    Unknown container nodes are descended into.

    Args:
        document: ADF dict, string, or None

    Returns:
        List of blocks in document order
    """
    if isinstance(document, str):
        return [Paragraph(document)] if document.strip() else []
    if not isinstance(document, dict):
        return []

    blocks: list[Block] = []
    for node in document.get("content") or []:
        if not isinstance(node, dict):
            continue
        node_type = node.get("type")

        if node_type in ("paragraph", "heading", "blockquote", "panel"):
            text = _inline_text(node).strip()
            if text:
                blocks.append(Paragraph(text))
        elif node_type == "bulletList":
            blocks.append(BulletList(_list_items(node)))
        elif node_type == "orderedList":
            start = (node.get("attrs") or {}).get("order", 1)
            blocks.append(OrderedList(_list_items(node), int(start or 1)))
        elif node_type == "codeBlock":
            blocks.append(CodeBlock(_inline_text(node)))
        elif "content" in node:
            blocks.extend(adf_to_blocks(node))

    return blocks


def blocks_to_text(blocks: list[Block]) -> str:
    """Render blocks as plain text, flattening lists with `•` and `N.` prefixes."""
    lines: list[str] = []
    for block in blocks:
        if isinstance(block, Paragraph):
            lines.append(block.text)
        elif isinstance(block, BulletList):
            lines.extend(f"• {item}" for item in block.items)
        elif isinstance(block, OrderedList):
            lines.extend(
                f"{index}. {item}" for index, item in enumerate(block.items, block.start)
            )
        elif isinstance(block, CodeBlock):
            lines.append(f"```\n{block.text}\n```")
    return "\n".join(lines).strip()


def text_to_blocks(text: str) -> list[Block]:
    """
    Split plain text into blocks.

    Each non-blank line becomes a paragraph, except consecutive lines
    starting with `-` or `•`, which are grouped into one bullet list.
    """
    blocks: list[Block] = []
    bullets: list[str] = []

    for line in text.split("\n"):
        stripped = line.strip()
        if not stripped:
            continue
        if stripped.startswith(BULLET_MARKERS):
            item = stripped[1:].strip()
            if item:
                bullets.append(item)
            continue
        if bullets:
            blocks.append(BulletList(tuple(bullets)))
            bullets = []
        blocks.append(Paragraph(stripped))

    if bullets:
        blocks.append(BulletList(tuple(bullets)))
    return blocks


def _paragraph_node(text: str) -> dict[str, Any]:
    return {"type": "paragraph", "content": [{"type": "text", "text": text}]}


def _list_node(list_type: str, items: tuple[str, ...], **attrs: Any) -> dict[str, Any]:
    node: dict[str, Any] = {
        "type": list_type,
        "content": [
            {"type": "listItem", "content": [_paragraph_node(item)]} for item in items
        ],
    }
    if attrs:
        node["attrs"] = attrs
    return node


def blocks_to_adf(blocks: list[Block]) -> dict[str, Any]:
    """Build an ADF document from blocks."""
    content: list[dict[str, Any]] = []
    for block in blocks:
        if isinstance(block, Paragraph):
            content.append(_paragraph_node(block.text))
        elif isinstance(block, BulletList):
            content.append(_list_node("bulletList", block.items))
        elif isinstance(block, OrderedList):
            content.append(_list_node("orderedList", block.items, order=block.start))
        elif isinstance(block, CodeBlock):
            content.append(
                {"type": "codeBlock", "content": [{"type": "text", "text": block.text}]}
            )
    return {"type": "doc", "version": 1, "content": content}


def extract_text(document: Any) -> str:
    """Plain text of an ADF document (or pass-through for strings)."""
    return blocks_to_text(adf_to_blocks(document))


def text_to_adf(text: str) -> dict[str, Any]:
    """ADF document for plain text with optional bullet lines."""
    return blocks_to_adf(text_to_blocks(text))
