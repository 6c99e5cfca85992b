"""
Deterministic local filenames for fonts and stylesheets.

The same URL always maps to the same name, so repeated runs find the files
written by earlier runs and can skip them.
"""
import hashlib
import re
from typing import Optional
from urllib.parse import parse_qs, unquote, urlsplit

from .fontface import FontFace, format_to_extension
from .models import Naming

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]+")
_SLUG_UNSAFE = re.compile(r"[^a-z0-9]+")

# Long multi-family URLs would otherwise hit filesystem name limits
MAX_CSS_STEM = 120


def _url_hash(url: str) -> str:
    return hashlib.sha1(url.encode("utf-8")).hexdigest()[:12]


def slugify(value: str) -> str:
    """'Open Sans:wght@400;700' -> 'open-sans-wght-400-700'"""
    return _SLUG_UNSAFE.sub("-", value.lower()).strip("-")


def sanitize_filename(name: str) -> str:
    name = _UNSAFE.sub("_", name).strip("._")
    return name


def url_filename(url: str, font_format: Optional[str] = None) -> str:
    """
    Filename from the final path segment of a font URL.

    fonts.gstatic.com/s/roboto/v30/abc.woff2 -> abc.woff2

    URLs with a query string (the legacy /l/font?kit=... endpoint) or without a
    usable segment get a short hash of the whole URL so distinct fonts never
    share a name.
    """
    parts = urlsplit(url)
    segment = sanitize_filename(unquote(parts.path.rsplit("/", 1)[-1]))

    if segment and not parts.query:
        if "." not in segment:
            ext = format_to_extension(font_format)
            if ext:
                segment = f"{segment}.{ext}"
        return segment

    stem, dot, ext = segment.rpartition(".")
    if not dot:
        stem, ext = segment, ""
    ext = ext or format_to_extension(font_format)
    stem = f"{stem or 'font'}-{_url_hash(url)}"
    return f"{stem}.{ext}" if ext else stem


def descriptive_filename(face: FontFace) -> Optional[str]:
    """
    <family>-<weight>-<style>-<writing system>.<ext>, e.g. roboto-400-normal-latin.woff2

    Returns None when the rule lacks a field the name needs.
    """
    if not (face.family and face.weight and face.style and face.extension):
        return None
    parts = [
        face.family.lower().replace(" ", "-"),
        face.weight.replace(" ", "-"),
        face.style,
    ]
    if face.writing_system:
        parts.append(face.writing_system.replace(" ", "-"))
    return sanitize_filename("-".join(parts).lower()) + "." + face.extension


def font_filename(url: str, face: Optional[FontFace] = None, naming: Naming = Naming.URL) -> str:
    """Pick the local filename for a font URL under the given naming scheme."""
    if naming is Naming.DESCRIPTIVE and face is not None:
        name = descriptive_filename(face)
        if name:
            return name
    return url_filename(url, face.format if face else None)


def css_filename(url: str, index: int = 1) -> str:
    """
    Filename for the rewritten stylesheet of a Google Fonts CSS URL.

    css2?family=Roboto                      -> roboto.css
    css2?family=Roboto&family=Open+Sans     -> roboto_open-sans.css
    anything without a family parameter     -> fonts-<index>.css
    """
    families = parse_qs(urlsplit(url).query).get("family", [])
    slugs = [slug for slug in (slugify(family) for family in families) if slug]
    if not slugs:
        return f"fonts-{index}.css"
    name = "_".join(slugs)
    if len(name) > MAX_CSS_STEM:
        name = f"{name[:MAX_CSS_STEM - 13].rstrip('-_')}-{_url_hash(url)}"
    return name + ".css"
