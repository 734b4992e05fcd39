"""Input sanitization for free-text request fields.

Removes every HTML tag (and the contents of script and style elements)
and trims surrounding whitespace. Character references are decoded so
the stored value is plain text.
"""

from html.parser import HTMLParser

_DROP_CONTENT_TAGS = frozenset({"script", "style"})


class _TextExtractor(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self._parts: list[str] = []
        self._skip_depth = 0

    def handle_starttag(self, tag: str, attrs: list) -> None:
        if tag in _DROP_CONTENT_TAGS:
            self._skip_depth += 1

    def handle_endtag(self, tag: str) -> None:
        if tag in _DROP_CONTENT_TAGS and self._skip_depth:
            self._skip_depth -= 1

    def handle_data(self, data: str) -> None:
        if not self._skip_depth:
            self._parts.append(data)

    @property
    def text(self) -> str:
        return "".join(self._parts)


def strip_markup(value: str) -> str:
    """Return ``value`` with all markup removed and whitespace trimmed.

    >>> strip_markup("  <b>Ana</b> López ")
    'Ana López'
    """
    parser = _TextExtractor()
    parser.feed(value)
    parser.close()
    return parser.text.strip()
