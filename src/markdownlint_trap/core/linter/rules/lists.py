"""List structure rules."""
from typing import Generator

from ..document import Document
from ..models import FixInfo, Tier, Violation
from .helpers import RuleConfig


def no_empty_list_items(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """
    Flag list items with no content.

    Usually left behind by document converters. The fix deletes the line.
    """
    tokens = doc.tokens
    for i, token in enumerate(tokens[:-1]):
        if token.type != "list_item_open" or tokens[i + 1].type != "list_item_close":
            continue
        if not token.map:
            continue

        line_num = token.map[0] + 1
        yield Violation(
            rule="no-empty-list-items",
            line=line_num,
            message="Empty list item found",
            fix=FixInfo(edit_column=1, delete_count=-1),
            tier=Tier.AUTO_FIX,
            confidence=1.0,
            context=doc.line(line_num).strip(),
            original=doc.line(line_num),
            suggestion="",
        )
