"""Token-to-block conversion using source line positions"""

from mdsite.core.models import StagedBlock
from mdsite.crud.models import BlockEnum


BLOCK_TYPE_MAP: dict[str, BlockEnum] = {
    'heading_open':      BlockEnum.heading,
    'bullet_list_open':  BlockEnum.list,
    'ordered_list_open': BlockEnum.list,
    'fence':             BlockEnum.code,
    'code_block':        BlockEnum.code,
    'table_open':        BlockEnum.table,
    'html_block':        BlockEnum.html,
    'blockquote_open':   BlockEnum.quote,
}


def _heading_level(token) -> int | None:
    """Extract heading level (1-6) from a heading_open token tag, else None."""
    if token.type == 'heading_open' and token.tag[1:].isdigit():
        return int(token.tag[1:])
    return None


def _para_type(tokens: list, i: int) -> BlockEnum:
    """Return figure if paragraph at i contains only an image inline, else paragraph."""
    for tok in tokens[i + 1:]:
        if tok.type == 'paragraph_close':
            break
        if tok.type == 'inline' and tok.children:
            non_ws = [c for c in tok.children if c.type not in ('softbreak', 'hardbreak')]
            if len(non_ws) == 1 and non_ws[0].type == 'image':
                return BlockEnum.figure
    return BlockEnum.paragraph


def _source_slice(token, source_lines: list[str]) -> str:
    """Extract raw source for a block via token.map; fallback to token.content."""
    if token.map:
        start, end = token.map
        return ''.join(source_lines[start:end]).rstrip()
    return token.content.rstrip()


def tokens_to_blocks(tokens: list, source_lines: list[str]) -> list[StagedBlock]:
    """Convert top-level tokens to typed blocks; nested tokens stay inside their parent."""
    blocks: list[StagedBlock] = []

    for i, tok in enumerate(tokens):
        if tok.level != 0:
            continue
        if tok.type == 'paragraph_open':
            block_type = _para_type(tokens, i)
        else:
            block_type = BLOCK_TYPE_MAP.get(tok.type)
            if block_type is None:
                continue

        blocks.append(StagedBlock(
            type=block_type,
            content=_source_slice(tok, source_lines),
            level=_heading_level(tok),
        ))

    return blocks
