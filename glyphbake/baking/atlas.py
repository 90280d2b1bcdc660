"""AtlasBitmap - composite glyph coverage image."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from PIL import Image as PILImage


@dataclass
class AtlasBitmap:
    """
    Single-channel atlas image.

    Holds CPU data without GPU knowledge, rows top-down.

    Attributes:
        data: Numpy array of shape (height, width) with uint8 coverage values.
        width: Atlas width in texels.
        height: Atlas height in texels.
    """

    data: np.ndarray
    width: int
    height: int

    @classmethod
    def empty(cls, width: int, height: int) -> "AtlasBitmap":
        """Create a fully transparent atlas."""
        return cls(data=np.zeros((height, width), dtype=np.uint8), width=width, height=height)

    @classmethod
    def from_array(cls, data: np.ndarray) -> "AtlasBitmap":
        """
        Create atlas from a numpy array.

        Args:
            data: Array of shape (height, width) or (height, width, channels).
                For multi-channel data the last channel (alpha) is used as coverage.
        """
        if data.ndim == 3:
            data = data[:, :, -1]
        if data.ndim != 2:
            raise ValueError(f"Expected 2D or 3D array, got shape {data.shape}")
        data = np.ascontiguousarray(data, dtype=np.uint8)
        height, width = data.shape
        return cls(data=data, width=width, height=height)

    @classmethod
    def from_image(cls, image: "PILImage.Image") -> "AtlasBitmap":
        """Create atlas from a Pillow image (alpha, or luminance for images without alpha)."""
        if image.mode in ("RGBA", "LA"):
            image = image.getchannel("A")
        else:
            image = image.convert("L")
        return cls.from_array(np.array(image, dtype=np.uint8))

    def blit(self, coverage: np.ndarray, x: int, y: int) -> None:
        """Copy a glyph coverage buffer into the atlas at (x, y)."""
        h, w = coverage.shape
        if w == 0 or h == 0:
            return
        if x < 0 or y < 0 or x + w > self.width or y + h > self.height:
            raise ValueError(
                f"Blit {w}x{h} at ({x}, {y}) exceeds atlas {self.width}x{self.height}"
            )
        self.data[y:y + h, x:x + w] = coverage

    def to_rgba(self) -> np.ndarray:
        """Coverage replicated into RGB and written into alpha, shape (height, width, 4)."""
        return np.repeat(self.data[:, :, np.newaxis], 4, axis=2)

    def to_image(self, mode: str = "RGBA") -> "PILImage.Image":
        from PIL import Image

        if mode == "L":
            return Image.fromarray(self.data)
        return Image.fromarray(self.to_rgba())

    def get_upload_data(self, channels: int = 4) -> tuple[np.ndarray, tuple[int, int]]:
        """
        Get data ready for GPU upload.

        Returns:
            Tuple of (data, (width, height)).
        """
        if channels == 1:
            return np.ascontiguousarray(self.data), (self.width, self.height)
        if channels == 4:
            return self.to_rgba(), (self.width, self.height)
        raise ValueError(f"Unsupported channel count: {channels}")


__all__ = ["AtlasBitmap"]
