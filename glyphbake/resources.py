"""
Resource loading for baked fonts.

A baked font is stored as two sibling files sharing an output name:
<name>.json (descriptor, or <name>.fnt in BMFont text layout) and <name>.tga
(atlas). Names may be passed with or without extension; file names are
matched case-insensitively.
"""

from __future__ import annotations

import dataclasses
from pathlib import Path
from typing import Tuple

from PIL import Image, UnidentifiedImageError

from glyphbake import log
from glyphbake.baking.atlas import AtlasBitmap
from glyphbake.descriptor import FontDescriptor, codec
from glyphbake.errors import ResourceLoadError


DESCRIPTOR_EXT = ".json"
TEXT_DESCRIPTOR_EXT = ".fnt"
ATLAS_EXT = ".tga"

_KNOWN_EXTS = (DESCRIPTOR_EXT, TEXT_DESCRIPTOR_EXT, ATLAS_EXT)


def strip_extension(name: str) -> str:
    """Drop a known font resource extension, ignoring case."""
    lower = name.lower()
    for ext in _KNOWN_EXTS:
        if lower.endswith(ext):
            return name[: -len(ext)]
    return name


class ResourceLoader:
    """Reads and writes baked font resources under a root directory."""

    def __init__(self, root: str | Path = "."):
        self.root = Path(root)

    def path_for(self, name: str, ext: str) -> Path:
        """Path a resource would be written to."""
        return self.root / (strip_extension(str(name)) + ext)

    def resolve(self, name: str, ext: str) -> Path:
        """
        Find an existing resource file.

        Raises:
            ResourceLoadError: No file matches name + ext.
        """
        path = self.path_for(name, ext)
        if path.is_file():
            return path

        directory = path.parent
        if directory.is_dir():
            target = path.name.lower()
            for child in directory.iterdir():
                if child.name.lower() == target and child.is_file():
                    return child

        raise ResourceLoadError(f"Resource not found: {path}", path=path)

    def read_bytes(self, name: str, ext: str = "") -> bytes:
        path = self.resolve(name, ext) if ext else self.root / name
        try:
            return path.read_bytes()
        except OSError as exc:
            raise ResourceLoadError(f"Failed to read {path}: {exc}", path=path) from exc

    def read_text(self, name: str, ext: str = "") -> str:
        data = self.read_bytes(name, ext)
        try:
            return data.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise ResourceLoadError(f"{name}{ext} is not UTF-8 text", path=name) from exc

    # --- Load ---

    def load_descriptor(self, name: str) -> FontDescriptor:
        """
        Load descriptor for name, preferring JSON over BMFont text.

        Raises:
            ResourceLoadError: Neither file exists or it cannot be read.
            MalformedDescriptor: File exists but does not parse.
        """
        try:
            text = self.read_text(name, DESCRIPTOR_EXT)
        except ResourceLoadError:
            text = self.read_text(name, TEXT_DESCRIPTOR_EXT)
        return codec.parse(text)

    def load_atlas(self, name: str) -> AtlasBitmap:
        path = self.resolve(name, ATLAS_EXT)
        try:
            with Image.open(path) as image:
                image.load()
                return AtlasBitmap.from_image(image)
        except (OSError, UnidentifiedImageError) as exc:
            raise ResourceLoadError(f"Failed to decode atlas {path}: {exc}", path=path) from exc

    def load_font(self, name: str) -> Tuple[FontDescriptor, AtlasBitmap]:
        """Load descriptor and atlas, checking the atlas matches the descriptor."""
        descriptor = self.load_descriptor(name)
        atlas = self.load_atlas(name)
        if (atlas.width, atlas.height) != (descriptor.atlas_width, descriptor.atlas_height):
            raise ResourceLoadError(
                f"Atlas for {name} is {atlas.width}x{atlas.height}, "
                f"descriptor expects {descriptor.atlas_width}x{descriptor.atlas_height}",
                path=name,
            )
        log.info(f"[Resources] Loaded {name}: {len(descriptor)} glyphs")
        return descriptor, atlas

    # --- Save ---

    def save_descriptor(self, name: str, descriptor: FontDescriptor, fmt: str = "json") -> Path:
        ext = DESCRIPTOR_EXT if fmt == "json" else TEXT_DESCRIPTOR_EXT
        path = self.path_for(name, ext)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(codec.serialize(descriptor, fmt), encoding="utf-8")
        except OSError as exc:
            raise ResourceLoadError(f"Failed to write {path}: {exc}", path=path) from exc
        return path

    def save_atlas(self, name: str, atlas: AtlasBitmap) -> Path:
        path = self.path_for(name, ATLAS_EXT)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            atlas.to_image("RGBA").save(path, format="TGA")
        except OSError as exc:
            raise ResourceLoadError(f"Failed to write {path}: {exc}", path=path) from exc
        return path

    def save_font(
        self,
        name: str,
        descriptor: FontDescriptor,
        atlas: AtlasBitmap,
        fmt: str = "json",
    ) -> Tuple[Path, Path]:
        """Write descriptor and atlas under name. The descriptor's page file is set to the atlas file name."""
        atlas_path = self.save_atlas(name, atlas)
        if descriptor.page_file != atlas_path.name:
            descriptor = dataclasses.replace(descriptor, page_file=atlas_path.name)
        descriptor_path = self.save_descriptor(name, descriptor, fmt)
        log.info(f"[Resources] Saved {descriptor_path} and {atlas_path}")
        return descriptor_path, atlas_path


__all__ = [
    "ResourceLoader",
    "strip_extension",
    "DESCRIPTOR_EXT",
    "TEXT_DESCRIPTOR_EXT",
    "ATLAS_EXT",
]
