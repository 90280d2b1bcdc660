"""
Baker settings - bake request parameters and persisted defaults.

Defaults are stored as JSON (glyphbake.json by default) and used by the
command line apps and FontEngine when a caller omits parameters.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Optional, Tuple

from glyphbake import log


DEFAULT_SETTINGS_FILE = "glyphbake.json"


@dataclass
class BakeRequest:
    """
    Parameters of a single bake.

    - font_path: Path to a TrueType/OpenType file
    - font_size: Pixel size of the em square
    - atlas_width, atlas_height: Atlas dimensions in texels
    - first_char, num_chars: Contiguous codepoint range [first_char, first_char + num_chars)
    - padding: Texels kept free around every glyph
    """

    font_path: str = ""
    font_size: float = 32.0
    atlas_width: int = 512
    atlas_height: int = 512
    first_char: int = 32
    num_chars: int = 96
    padding: int = 1

    @property
    def atlas_size(self) -> Tuple[int, int]:
        return (self.atlas_width, self.atlas_height)

    def codepoints(self) -> range:
        return range(self.first_char, self.first_char + self.num_chars)

    def validate(self) -> None:
        """Raise ValueError if the request cannot describe a bake."""
        if not self.font_path:
            raise ValueError("font_path is empty")
        if not self.font_size > 0:
            raise ValueError(f"font_size must be positive, got {self.font_size}")
        if self.atlas_width <= 0 or self.atlas_height <= 0:
            raise ValueError(
                f"atlas size must be positive, got {self.atlas_width}x{self.atlas_height}"
            )
        if self.first_char < 0 or self.num_chars < 0:
            raise ValueError(
                f"codepoint range must be non-negative, got first={self.first_char} count={self.num_chars}"
            )
        if self.first_char + self.num_chars > 0x110000:
            raise ValueError("codepoint range exceeds U+10FFFF")
        if self.padding < 0:
            raise ValueError(f"padding must be >= 0, got {self.padding}")

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return asdict(self)

    @staticmethod
    def from_dict(data: dict) -> "BakeRequest":
        """Deserialize from dictionary."""
        if not isinstance(data, dict):
            raise ValueError(f"bake request must be an object, got {type(data).__name__}")
        return BakeRequest(
            font_path=str(data.get("font_path", "")),
            font_size=float(data.get("font_size", 32.0)),
            atlas_width=int(data.get("atlas_width", 512)),
            atlas_height=int(data.get("atlas_height", 512)),
            first_char=int(data.get("first_char", 32)),
            num_chars=int(data.get("num_chars", 96)),
            padding=int(data.get("padding", 1)),
        )


@dataclass
class BakerSettings:
    """
    Persisted defaults for bakes and the preview app.

    The request's font_path is usually empty here and filled in by the caller.
    """

    request: BakeRequest = field(default_factory=BakeRequest)
    output_dir: str = "."
    preview_text: str = "The quick brown fox\njumps over the lazy dog"
    preview_window: Tuple[int, int] = (960, 540)

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {
            "request": self.request.to_dict(),
            "output_dir": self.output_dir,
            "preview_text": self.preview_text,
            "preview_window": list(self.preview_window),
        }

    @staticmethod
    def from_dict(data: dict) -> "BakerSettings":
        """Deserialize from dictionary."""
        if not isinstance(data, dict):
            raise ValueError(f"settings must be an object, got {type(data).__name__}")
        window = data.get("preview_window", (960, 540))
        try:
            preview_window = (int(window[0]), int(window[1]))
        except (TypeError, ValueError, IndexError):
            preview_window = (960, 540)

        return BakerSettings(
            request=BakeRequest.from_dict(data.get("request", {})),
            output_dir=str(data.get("output_dir", ".")),
            preview_text=str(data.get("preview_text", BakerSettings.preview_text)),
            preview_window=preview_window,
        )

    @classmethod
    def load(cls, path: Optional[str | Path] = None) -> "BakerSettings":
        """Load settings from file. Missing or broken files give defaults."""
        path = Path(path or DEFAULT_SETTINGS_FILE)
        if not path.exists():
            return cls()

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return cls.from_dict(data)
        except (OSError, TypeError, ValueError) as e:
            log.warn(e, f"[Settings] Failed to load {path}, using defaults")
            return cls()

    def save(self, path: Optional[str | Path] = None) -> None:
        """Save settings to file."""
        path = Path(path or DEFAULT_SETTINGS_FILE)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)


__all__ = ["BakeRequest", "BakerSettings", "DEFAULT_SETTINGS_FILE"]
