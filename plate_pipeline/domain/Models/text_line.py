# plate_pipeline/domain/Models/text_line.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterator, Optional, Tuple


@dataclass(frozen=True)
class BoundingBox:
    """
    Rectángulo en coordenadas de imagen (píxeles).
    """
    left: int
    top: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.left + self.width

    @property
    def bottom(self) -> int:
        return self.top + self.height

    @classmethod
    def from_corners(cls, left: int, top: int, right: int, bottom: int) -> "BoundingBox":
        return cls(left, top, max(0, right - left), max(0, bottom - top))

    def expanded(self, fx: float, fy: float) -> "BoundingBox":
        """
        Amplía fx*width por cada lado horizontal y fy*height por cada lado
        vertical. Las coordenadas nunca bajan de 0.
        """
        dx = int(self.width * fx)
        dy = int(self.height * fy)
        return BoundingBox.from_corners(
            max(0, self.left - dx),
            max(0, self.top - dy),
            self.right + dx,
            self.bottom + dy,
        )

    def clipped(self, image_width: int, image_height: int) -> Optional["BoundingBox"]:
        """Recorta al tamaño de la imagen. None si queda vacío."""
        left = min(max(0, self.left), image_width)
        top = min(max(0, self.top), image_height)
        right = min(self.right, image_width)
        bottom = min(self.bottom, image_height)
        if right <= left or bottom <= top:
            return None
        return BoundingBox.from_corners(left, top, right, bottom)

    def to_tuple(self) -> Tuple[int, int, int, int]:
        return (self.left, self.top, self.width, self.height)


@dataclass(frozen=True)
class TextLine:
    text: str
    box: Optional[BoundingBox] = None


@dataclass(frozen=True)
class TextBlock:
    lines: Tuple[TextLine, ...] = ()


@dataclass(frozen=True)
class OcrResult:
    """
    Salida del OCR para un frame: texto completo + bloques de líneas.
    Los bloques sólo agrupan; no tienen semántica propia.
    """
    text: str = ""
    blocks: Tuple[TextBlock, ...] = field(default_factory=tuple)

    @property
    def lines(self) -> Iterator[TextLine]:
        for block in self.blocks:
            yield from block.lines

    @property
    def has_lines(self) -> bool:
        return any(block.lines for block in self.blocks)

    @classmethod
    def from_lines(cls, lines) -> "OcrResult":
        """Un bloque por línea; el texto completo se une con saltos de línea."""
        lines = tuple(lines)
        return cls(
            text="\n".join(line.text for line in lines),
            blocks=tuple(TextBlock(lines=(line,)) for line in lines),
        )
