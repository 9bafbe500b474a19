"""Parsed markdown document shared by all rules during one lint pass."""
from dataclasses import dataclass, field
from functools import cached_property
from typing import Optional

from markdown_it import MarkdownIt
from markdown_it.token import Token


def create_parser() -> MarkdownIt:
    """CommonMark parser with GFM tables, strikethrough and linkify."""
    return MarkdownIt("gfm-like")


@dataclass(frozen=True)
class Heading:
    """A heading found in the token stream."""
    level: int
    line: int            # 1-based line of the heading text
    text: str            # raw inline content
    setext: bool = False
    underline_length: int = 0


@dataclass
class Document:
    """
    Source lines plus the markdown-it token stream.

    Rules treat a Document as read-only. Line numbers handed out by helpers
    are 1-based and relative to the linted content (front matter excluded).
    """
    content: str
    path: str = "<string>"
    tokens: list[Token] = field(default_factory=list)
    front_matter_lines: int = 0

    @classmethod
    def parse(cls, content: str, path: str = "<string>",
              parser: Optional[MarkdownIt] = None,
              front_matter_lines: int = 0) -> "Document":
        parser = parser or create_parser()
        return cls(content=content, path=path, tokens=parser.parse(content),
                   front_matter_lines=front_matter_lines)

    @cached_property
    def lines(self) -> list[str]:
        return self.content.split('\n')

    def line(self, number: int) -> str:
        """Return the 1-based line, or '' when out of range."""
        if 1 <= number <= len(self.lines):
            return self.lines[number - 1]
        return ""

    @property
    def is_file(self) -> bool:
        """False for in-memory sources such as ``<string>`` or ``<stdin>``."""
        return bool(self.path) and not self.path.startswith('<')

    @cached_property
    def code_block_lines(self) -> frozenset[int]:
        """1-based lines inside fenced or indented code blocks, fences included."""
        lines: set[int] = set()
        for token in self.tokens:
            if token.type in ("fence", "code_block") and token.map:
                start, end = token.map
                lines.update(range(start + 1, end + 1))
        return frozenset(lines)

    @cached_property
    def headings(self) -> list[Heading]:
        """ATX and setext headings in document order."""
        headings = []
        for i, token in enumerate(self.tokens):
            if token.type != "heading_open" or not token.map:
                continue
            inline = self.tokens[i + 1] if i + 1 < len(self.tokens) else None
            text = inline.content if inline is not None and inline.type == "inline" else ""
            start, end = token.map
            setext = not token.markup.startswith('#')
            underline = len(self.line(end).strip()) if setext else 0
            headings.append(Heading(
                level=int(token.tag[1]),
                line=start + 1,
                text=text,
                setext=setext,
                underline_length=underline,
            ))
        return headings
