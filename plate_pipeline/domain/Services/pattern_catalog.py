# plate_pipeline/domain/Services/pattern_catalog.py
"""
Catálogo de formatos de placa coreana.

Cada formato es una plantilla estructural sobre tres clases de token:
  D  dígito ASCII
  H  carácter de tipo (una sílaba hangul del alfabeto de uso del vehículo)
  R  nombre de región de dos sílabas (sólo placas comerciales)

El matching sólo comprueba la estructura; la legalidad de los valores
concretos de H/R la decide el validador.
"""
from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Tuple

# [0-9] y no \d: \d de Python acepta dígitos Unicode.
_DIGIT = "[0-9]"
_HANGUL = "[가-힣]"

# Sub-variantes del formato general: misma estructura, distinto alfabeto de tipo
TYPE_CHARS_BY_VARIANT: Dict[str, str] = {
    "private": "가나다라마거너더러머버서어저고노도로모보소오조구누두루무부수우주",
    "commercial": "바사아자배",
    "rental": "하허호",
}

TYPE_CHARS: FrozenSet[str] = frozenset("".join(TYPE_CHARS_BY_VARIANT.values()))

REGION_NAMES: Tuple[str, ...] = (
    "서울", "경기", "인천", "강원", "충북", "충남", "대전", "경북",
    "경남", "부산", "울산", "대구", "전북", "전남", "광주", "제주",
)

REGION_CHARS: FrozenSet[str] = frozenset("".join(REGION_NAMES))


@dataclass(frozen=True)
class PlateShape:
    name: str
    pattern: re.Pattern
    has_region: bool = False

    @property
    def type_index(self) -> int:
        """Posición del carácter de tipo dentro de un match completo."""
        return 4 if self.has_region else -5


GENERAL = PlateShape(
    name="general",
    pattern=re.compile(f"{_DIGIT}{{2,3}}{_HANGUL}{_DIGIT}{{4}}"),
)

BUSINESS = PlateShape(
    name="business",
    pattern=re.compile(f"{_HANGUL}{{2}}{_DIGIT}{{2}}{_HANGUL}{_DIGIT}{{4}}"),
    has_region=True,
)

SHAPES: Tuple[PlateShape, ...] = (GENERAL, BUSINESS)


def shapes() -> Tuple[PlateShape, ...]:
    return SHAPES


def find_all(text: str) -> List[Tuple[PlateShape, str]]:
    """Todos los matches de todos los formatos, en orden de formato."""
    found: List[Tuple[PlateShape, str]] = []
    if not text:
        return found
    for shape in SHAPES:
        for m in shape.pattern.finditer(text):
            found.append((shape, m.group()))
    return found


def matches_any(text: str) -> bool:
    return any(shape.pattern.search(text) for shape in SHAPES) if text else False


def match_shape(text: str) -> Optional[PlateShape]:
    """Formato que encaja con el string completo, o None."""
    for shape in SHAPES:
        if shape.pattern.fullmatch(text):
            return shape
    return None


def classify(type_char: str) -> Optional[str]:
    """Sub-variante (private/commercial/rental) de un carácter de tipo."""
    for variant, chars in TYPE_CHARS_BY_VARIANT.items():
        if type_char in chars:
            return variant
    return None
