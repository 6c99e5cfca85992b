"""
Font-face parsing

Google Fonts CSS is a list of @font-face rules, each preceded by a comment
naming the writing system it covers:

    /* latin */
    @font-face {
      font-family: 'Roboto';
      font-style: normal;
      font-weight: 400;
      src: url(https://fonts.gstatic.com/s/roboto/v30/abc.woff2) format('woff2');
    }

This module turns those rules into FontFace records. They feed verbose output
and the descriptive naming scheme; the download itself only needs the URLs.
"""
import re
from dataclasses import dataclass
from typing import Dict, List, Optional

FONT_FACE = re.compile(r"@font-face\s*\{(?P<body>[^}]*)\}", re.IGNORECASE)
COMMENT = re.compile(r"/\*(?P<text>.*?)\*/", re.DOTALL)
PROPERTY = re.compile(r"(?P<name>[a-zA-Z-]+)\s*:\s*(?P<value>[^;]+);?")
SRC_URL = re.compile(r"""url\(\s*['"]?(?P<url>[^'")\s]+)['"]?\s*\)""", re.IGNORECASE)
SRC_FORMAT = re.compile(r"""format\(\s*['"]?(?P<format>[^'")\s]+)['"]?\s*\)""", re.IGNORECASE)

FORMAT_EXTENSIONS = {
    "truetype": "ttf",
    "opentype": "otf",
    "woff": "woff",
    "woff2": "woff2",
    "embedded-opentype": "eot",
    "svg": "svg",
}


def format_to_extension(font_format: Optional[str]) -> str:
    """Map a CSS format() hint to a file extension ("" when unknown)."""
    if not font_format:
        return ""
    return FORMAT_EXTENSIONS.get(font_format.lower(), "")


@dataclass(frozen=True)
class FontFace:
    """One @font-face rule."""
    family: str
    style: Optional[str]
    weight: Optional[str]
    stretch: Optional[str]
    display: Optional[str]
    url: Optional[str]
    format: Optional[str]
    writing_system: str = ""

    @property
    def extension(self) -> str:
        return format_to_extension(self.format)

    def describe(self) -> List[str]:
        """Human readable lines for verbose output."""
        lines = [
            f"Font family: {self.family}",
            f"Font style: {self.style or '-'}",
            f"Font weight: {self.weight or '-'}",
        ]
        if self.stretch:
            lines.append(f"Font stretch: {self.stretch}")
        lines.append(f"Font display: {self.display or '-'}")
        lines.append(f"Writing system: {self.writing_system or '-'}")
        lines.append(f"Format: {self.format or 'unknown'}")
        return lines


def _unquote(value: str) -> str:
    return value.strip().strip("'\"").strip()


def _parse_properties(body: str) -> Dict[str, str]:
    props = {}
    for match in PROPERTY.finditer(body):
        props[match.group("name").strip().lower()] = match.group("value").strip()
    return props


def parse_font_face(body: str, writing_system: str = "") -> FontFace:
    """Parse the declarations inside one @font-face block."""
    props = _parse_properties(body)
    src = props.get("src", "")
    url_match = SRC_URL.search(src)
    format_match = SRC_FORMAT.search(src)
    return FontFace(
        family=_unquote(props.get("font-family", "")),
        style=props.get("font-style"),
        weight=props.get("font-weight"),
        stretch=props.get("font-stretch"),
        display=props.get("font-display"),
        url=url_match.group("url") if url_match else None,
        format=format_match.group("format") if format_match else None,
        writing_system=writing_system,
    )


def split_font_faces(css: str) -> List[FontFace]:
    """
    Return every @font-face rule in document order.

    The writing system is taken from the closest comment before the rule.
    Rules without a preceding comment inherit the previous rule's writing
    system, or get an empty one.
    """
    faces = []
    writing_system = ""
    pos = 0
    for match in FONT_FACE.finditer(css):
        comments = list(COMMENT.finditer(css, pos, match.start()))
        if comments:
            writing_system = comments[-1].group("text").strip()
        faces.append(parse_font_face(match.group("body"), writing_system))
        pos = match.end()
    return faces


def faces_by_url(css: str) -> Dict[str, FontFace]:
    """Map each font URL to the first @font-face rule that uses it."""
    result = {}
    for face in split_font_faces(css):
        if face.url and face.url not in result:
            result[face.url] = face
    return result
