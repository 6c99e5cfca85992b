"""
URL Extractor
Finds url(...) tokens in CSS text and returns the font URLs they reference.
"""
import re
from typing import Iterator, List, NamedTuple

from logging_config import get_logger
from .errors import ParseError

logger = get_logger(__name__)

# Comments, strings and the start of url( tokens, scanned in one left-to-right
# pass so that url( inside a comment or a string is never taken for a token.
# An unterminated comment runs to the end of the text; an unterminated string
# ends at the line break, as in the CSS tokenizer.
SCAN = re.compile(
    r"""(?P<comment>/\*.*?(?:\*/|\Z))"""
    r"""|(?P<string>"(?:[^"\\\n]|\\.)*"?|'(?:[^'\\\n]|\\.)*'?)"""
    r"""|(?P<open>(?<![\w-])url\()""",
    re.IGNORECASE | re.DOTALL,
)

# A complete token, matched where SCAN found url(
URL_TOKEN = re.compile(
    r"""url\(\s*(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)'|(?P<bare>[^'"()\s]*))\s*\)""",
    re.IGNORECASE,
)

FONT_URL_SCHEMES = ("http://", "https://")


class UrlToken(NamedTuple):
    """One url(...) occurrence. start/end cover the whole token."""
    url: str
    quote: str
    start: int
    end: int


def iter_url_tokens(css: str, source_url: str = "") -> Iterator[UrlToken]:
    """
    Yield every url(...) token in document order, data URIs excluded.

    Text inside /* comments */ and quoted strings is skipped.

    Args:
        css: CSS text
        source_url: Where the CSS came from, only used in error messages

    Raises:
        ParseError: A url( token is never closed
    """
    pos = 0
    while True:
        match = SCAN.search(css, pos)
        if match is None:
            return
        pos = match.end()
        if match.lastgroup != "open":
            continue

        token = URL_TOKEN.match(css, match.start())
        if token is None:
            # Unquoted data URIs may hold spaces or quotes the token pattern rejects
            rest = css[match.end():].lstrip()
            close = css.find(")", match.end())
            if rest[:5].lower() == "data:" and close != -1:
                pos = close + 1
                continue
            line = css.count("\n", 0, match.start()) + 1
            raise ParseError(source_url or "<css>", f"unterminated url( token on line {line}")
        pos = token.end()

        if token.group("dq") is not None:
            url, quote = token.group("dq"), '"'
        elif token.group("sq") is not None:
            url, quote = token.group("sq"), "'"
        else:
            url, quote = token.group("bare"), ""

        url = url.strip()
        if url.lower().startswith("data:"):
            continue
        yield UrlToken(url, quote, token.start(), token.end())


def is_font_url(url: str) -> bool:
    return url.lower().startswith(FONT_URL_SCHEMES)


def extract_font_urls(css: str, source_url: str = "") -> List[str]:
    """
    Return the absolute http(s) URLs referenced by url(...) tokens.

    Order is document order and each URL appears once, at its first occurrence.
    """
    seen = set()
    urls = []
    for token in iter_url_tokens(css, source_url):
        if not is_font_url(token.url):
            logger.debug(f"Ignoring non-http url() reference: {token.url}")
            continue
        if token.url in seen:
            continue
        seen.add(token.url)
        urls.append(token.url)
    return urls
