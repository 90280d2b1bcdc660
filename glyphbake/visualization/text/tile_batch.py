"""TileBatchBuffer - CPU side of a font's batched quads."""

from __future__ import annotations

from typing import Callable, Iterable, List, Optional, Tuple

import numpy as np

from glyphbake.visualization.text.layout import Tile


# Two triangles per quad, corners ordered top-left, top-right, bottom-left, bottom-right
_QUAD_INDICES = np.array([0, 1, 2, 2, 1, 3], dtype=np.uint32)


class TileBatchBuffer:
    """
    All live tiles of one font.

    Tiles are only appended or cleared all at once; removing a single run
    means clearing and appending the surviving runs again. ``on_change`` is
    called after every modification (BitmapFont passes its mark_dirty).
    """

    def __init__(self, on_change: Optional[Callable[[], None]] = None):
        self._tiles: List[Tile] = []
        self._on_change = on_change

    def __len__(self) -> int:
        return len(self._tiles)

    @property
    def tiles(self) -> Tuple[Tile, ...]:
        return tuple(self._tiles)

    def append(self, tiles: Iterable[Tile]) -> Tuple[int, int]:
        """
        Append tiles.

        Returns:
            (start, end) slice of the appended tiles in the batch.
        """
        start = len(self._tiles)
        self._tiles.extend(tiles)
        if self._on_change is not None:
            self._on_change()
        return (start, len(self._tiles))

    def clear(self) -> None:
        self._tiles.clear()
        if self._on_change is not None:
            self._on_change()

    def build(self, atlas_width: int, atlas_height: int) -> Tuple[np.ndarray, np.ndarray]:
        """
        Flatten tiles into vertex and index arrays.

        Returns:
            vertices: float32 array of shape (4 * N, 4), rows (x, y, u, v).
            indices: uint32 array of shape (6 * N,).
        """
        count = len(self._tiles)
        vertices = np.empty((count * 4, 4), dtype=np.float32)
        if count == 0:
            return vertices, np.empty(0, dtype=np.uint32)

        tiles = self._tiles
        x0 = np.fromiter((t.x for t in tiles), dtype=np.float32, count=count)
        y0 = np.fromiter((t.y for t in tiles), dtype=np.float32, count=count)
        w = np.fromiter((t.width for t in tiles), dtype=np.float32, count=count)
        h = np.fromiter((t.height for t in tiles), dtype=np.float32, count=count)
        sx = np.fromiter((t.src_x for t in tiles), dtype=np.float32, count=count)
        sy = np.fromiter((t.src_y for t in tiles), dtype=np.float32, count=count)

        u0 = sx / atlas_width
        v0 = sy / atlas_height
        u1 = (sx + w) / atlas_width
        v1 = (sy + h) / atlas_height
        x1 = x0 + w
        y1 = y0 + h

        corners = vertices.reshape(count, 4, 4)
        corners[:, 0] = np.stack([x0, y0, u0, v0], axis=1)
        corners[:, 1] = np.stack([x1, y0, u1, v0], axis=1)
        corners[:, 2] = np.stack([x0, y1, u0, v1], axis=1)
        corners[:, 3] = np.stack([x1, y1, u1, v1], axis=1)

        base = (np.arange(count, dtype=np.uint32) * 4)[:, np.newaxis]
        indices = (base + _QUAD_INDICES).reshape(-1)
        return vertices, indices


__all__ = ["TileBatchBuffer"]
