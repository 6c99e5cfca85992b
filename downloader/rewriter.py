"""CSS Rewriter: points url(...) tokens at the downloaded copies."""

from typing import Dict

from .extractor import iter_url_tokens


def normalize_prefix(prefix: str) -> str:
    """'./fonts' -> './fonts/', '' stays '' (bare filenames)."""
    if prefix and not prefix.endswith("/"):
        return prefix + "/"
    return prefix


def rewrite_css(css: str, mapping: Dict[str, str], fonts_prefix: str = "./", source_url: str = "") -> str:
    """
    Replace font URLs inside url(...) tokens with <fonts_prefix><filename>.

    Args:
        css: Original CSS text
        mapping: Original font URL -> local filename
        fonts_prefix: Path prefix for the rewritten references
        source_url: Where the CSS came from, only used in error messages

    Only tokens whose URL is exactly a mapping key are touched. The token keeps
    its quote style and everything outside the tokens is copied unchanged.
    """
    prefix = normalize_prefix(fonts_prefix)
    pieces = []
    pos = 0
    for token in iter_url_tokens(css, source_url):
        filename = mapping.get(token.url)
        if filename is None:
            continue
        local = f"{prefix}{filename}"
        quote = token.quote
        if not quote and any(c in local for c in " \t\n'\"()"):
            quote = '"'
        pieces.append(css[pos:token.start])
        pieces.append(f"url({quote}{local}{quote})")
        pos = token.end
    pieces.append(css[pos:])
    return "".join(pieces)
