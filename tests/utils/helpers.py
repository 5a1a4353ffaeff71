"""
Test helper utilities for quotation-core library.
"""

from io import BytesIO
from typing import Any, Iterator, List, Optional, Tuple

from PIL import Image

from quotation_core.core.document_tree import (
    DocumentTree, ImageRun, Paragraph, Table, TextRun, iter_block_text, iter_runs,
)

SEAL_URL = "https://assets.example.com/seals/chembio.png"
MISSING_SEAL_URL = "https://assets.example.com/seals/missing.png"
BROKEN_SEAL_URL = "https://assets.example.com/seals/not-an-image.png"
UNREACHABLE_SEAL_URL = "https://unreachable.example.invalid/seal.png"


def make_png(size: Tuple[int, int] = (32, 32), color: Tuple[int, int, int] = (0, 102, 204)) -> bytes:
    """Render a solid-color PNG with Pillow."""
    buffer = BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def all_text(tree: DocumentTree) -> str:
    """Every text run of the tree joined by newlines."""
    return "\n".join(tree.iter_text())


def block_text(block: Any) -> str:
    return "\n".join(iter_block_text(block))


def find_runs(blocks: List[Any], text: str) -> List[TextRun]:
    """Text runs whose text contains ``text``."""
    found = []
    for block in blocks:
        for run in iter_runs(block):
            if isinstance(run, TextRun) and text in run.text:
                found.append(run)
    return found


def find_images(blocks: List[Any]) -> List[ImageRun]:
    return [run for block in blocks for run in iter_runs(block) if isinstance(run, ImageRun)]


def tables(blocks: List[Any]) -> Iterator[Table]:
    return (block for block in blocks if isinstance(block, Table))


def banner_fill(tree: DocumentTree) -> Optional[str]:
    """Fill color of the header banner (first cell of the first table)."""
    first = tree.children[0]
    assert isinstance(first, Table), f"expected header table, got {type(first).__name__}"
    shading = first.rows[0].cells[0].shading
    return shading.fill if shading else None


def items_table(tree: DocumentTree) -> Table:
    """The table whose header row starts with 'S.No.'."""
    for table in tables(tree.children):
        if table.rows and table.rows[0].is_header and table.rows[0].cells[0].text == "S.No.":
            return table
    raise AssertionError("items table not found")


def paragraphs_with(blocks: List[Any], text: str) -> List[Paragraph]:
    return [block for block in blocks if isinstance(block, Paragraph) and text in block.text]
