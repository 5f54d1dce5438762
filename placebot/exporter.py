"""
Write human-readable snapshots of each fetched board: palette legend, id matrix, PNG image.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict

from PIL import Image

from placebot import config
from placebot.board import Board
from placebot.models import Palette

_log = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"


def render_legend(palette: Palette) -> str:
    return "".join(
        f"Color {c.id}: {c.name} (RGB: {c.red},{c.green},{c.blue})\n"
        for c in sorted(palette.values(), key=lambda c: c.id)
    )


def render_matrix(board: Board) -> str:
    return "".join("".join(f"{cid:2} " for cid in row) + "\n" for row in board.rows())


def render_image(palette: Palette, board: Board) -> Image.Image:
    img = Image.new("RGB", (board.size, board.size))
    rgb: Dict[int, tuple] = {cid: c.rgb for cid, c in palette.items()}
    px = img.load()
    for y, row in enumerate(board.rows()):
        for x, cid in enumerate(row):
            color = rgb.get(cid)
            if color is not None:
                px[x, y] = color
    return img


class SnapshotExporter:
    def __init__(self, out_dir: Path = config.MAP_DIR):
        self.out_dir = Path(out_dir)

    def export(self, palette: Palette, board: Board, timestamp: str) -> Dict[str, Path]:
        """Write colors_<ts>.txt, board_<ts>.txt and board_<ts>.png. I/O errors propagate."""
        self.out_dir.mkdir(parents=True, exist_ok=True)
        paths = {
            "colors": self.out_dir / f"colors_{timestamp}.txt",
            "board": self.out_dir / f"board_{timestamp}.txt",
            "image": self.out_dir / f"board_{timestamp}.png",
        }
        paths["colors"].write_text(render_legend(palette), encoding="utf-8")
        paths["board"].write_text(render_matrix(board), encoding="utf-8")
        render_image(palette, board).save(paths["image"])
        _log.info("Board data saved to %s with timestamp %s", self.out_dir, timestamp)
        return paths
