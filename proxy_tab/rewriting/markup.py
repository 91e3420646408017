from typing import Optional, Union

from bs4 import BeautifulSoup

Markup = Union[str, bytes]


def is_blank(markup: Optional[Markup]) -> bool:
    return not markup or not markup.strip()


def parse_markup(markup: Markup, encoding: Optional[str] = None) -> BeautifulSoup:
    """
    Parse HTML with the tolerant lxml parser.

    Bytes are decoded by BeautifulSoup: ``encoding`` (the charset from the HTTP
    header) wins when given, otherwise the document's BOM or <meta charset>
    decides.
    """
    if isinstance(markup, bytes):
        return BeautifulSoup(markup, "lxml", from_encoding=encoding)
    return BeautifulSoup(markup, "lxml")
