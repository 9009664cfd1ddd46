"""
Static asset lookup for report generation.

Insignia images and TrueType fonts are optional. A missing asset never fails
a request: images resolve to None and render as an empty slot, fonts fall
back to another face (or to the renderer's built-in family).
"""

import base64
import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from reportlab.lib.utils import ImageReader

logger = logging.getLogger(__name__)

LEFT_INSIGNIA = "logo_pb.png"
RIGHT_INSIGNIA = "logo_pmpb.png"


@dataclass(frozen=True)
class FontSet:
    """Font files for the four faces of the report font family."""
    normal: Optional[Path] = None
    bold: Optional[Path] = None
    italics: Optional[Path] = None
    bold_italics: Optional[Path] = None

    @property
    def is_empty(self) -> bool:
        return self.normal is None

    def as_dict(self) -> dict:
        return {
            "normal": self.normal,
            "bold": self.bold,
            "italics": self.italics,
            "bolditalics": self.bold_italics,
        }


def resolve_image(name: str, search_dirs: Sequence[Path]) -> Optional[str]:
    """
    Find an image and return it as a base64 data URI.

    Args:
        name: File name, e.g. 'logo_pb.png'
        search_dirs: Directories to look in, in order

    Returns:
        'data:image/png;base64,...' or None when the file is missing,
        cannot be read or is not a decodable image
    """
    for directory in search_dirs:
        path = Path(directory) / name
        if not path.is_file():
            continue
        try:
            data = path.read_bytes()
        except OSError as e:
            logger.warning("Could not read image %s: %s", path, e)
            return None
        try:
            ImageReader(io.BytesIO(data)).getSize()
        except (ValueError, OSError) as e:
            logger.warning("Ignoring undecodable image %s: %s", path, e)
            return None
        return "data:image/png;base64," + base64.b64encode(data).decode("ascii")

    logger.debug("Image %s not found in %s", name, [str(d) for d in search_dirs])
    return None


def _font_files(fonts_dir: Path) -> List[Path]:
    if not fonts_dir.is_dir():
        return []
    return sorted(
        (p for p in fonts_dir.iterdir() if p.is_file() and p.suffix.lower() == ".ttf"),
        key=lambda p: p.name.lower(),
    )


def _find(files: Iterable[Path], *parts: str, exclude: Sequence[str] = ()) -> Optional[Path]:
    """First file whose name contains one of the parts (tried in order)."""
    files = list(files)
    for part in parts:
        for path in files:
            name = path.name.lower()
            if part.lower() in name and not any(word in name for word in exclude):
                return path
    return None


def resolve_font_set(fonts_dir: Path) -> FontSet:
    """
    Pick the four font faces from a directory of .ttf files.

    Names are matched by case-insensitive substring: 'Regular'; 'Bold' or
    'Medium'; 'Italic'; 'BoldItalic' or 'MediumItalic'. Upright bold faces
    are preferred over italic ones for the bold slot. Unmatched slots fall
    back to the regular face, then to the first font file found.

    Returns:
        FontSet with every slot None when the directory is absent or empty
    """
    files = _font_files(Path(fonts_dir))
    if not files:
        logger.warning("No .ttf fonts found in %s; using built-in fonts", fonts_dir)
        return FontSet()

    fallback = files[0]
    regular = _find(files, "regular")
    bold = _find(files, "bold", "medium", exclude=("italic",)) or _find(files, "bold", "medium")
    italic = _find(files, "italic", exclude=("bold", "medium")) or _find(files, "italic")
    bold_italic = _find(files, "bolditalic", "mediumitalic")

    font_set = FontSet(
        normal=regular or fallback,
        bold=bold or regular or fallback,
        italics=italic or regular or fallback,
        bold_italics=bold_italic or regular or fallback,
    )
    logger.info(
        "Fonts resolved: %s",
        ", ".join(f"{k}={v.name}" for k, v in font_set.as_dict().items()),
    )
    return font_set
