# plate_pipeline/domain/Services/detection_memory.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional

MAX_RECENT = 10


@dataclass
class _Entry:
    count: int
    touched: int   # secuencia del último incremento


class DetectionMemory:
    """
    Memoria acotada placa -> nº de observaciones durante la sesión.

    Al superar la capacidad se expulsa la entrada con menor conteo; entre
    empates, la incrementada hace más tiempo. La placa recién incrementada
    nunca se expulsa en su propio incremento.
    """

    def __init__(self, capacity: Optional[int] = None):
        if capacity is None:
            from plate_pipeline.core.config import settings
            capacity = int(getattr(settings, "max_recent_detections", MAX_RECENT))
        if capacity < 1:
            raise ValueError("capacity debe ser >= 1")
        self.capacity = capacity
        self._entries: Dict[str, _Entry] = {}
        self._seq = 0

    def increment(self, plate: str) -> int:
        """Suma una observación y devuelve el conteo resultante."""
        self._seq += 1
        entry = self._entries.get(plate)
        if entry is None:
            # se expulsa antes de insertar: el tamaño nunca supera la capacidad
            if len(self._entries) >= self.capacity:
                self._evict()
            entry = self._entries[plate] = _Entry(count=0, touched=self._seq)
        entry.count += 1
        entry.touched = self._seq

        return entry.count

    def count(self, plate: str) -> int:
        entry = self._entries.get(plate)
        return entry.count if entry else 0

    def snapshot(self) -> Dict[str, int]:
        return {k: e.count for k, e in self._entries.items()}

    def clear(self) -> None:
        self._entries.clear()
        self._seq = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, plate: str) -> bool:
        return plate in self._entries

    def _evict(self) -> None:
        victim = min(
            self._entries,
            key=lambda k: (self._entries[k].count, self._entries[k].touched),
        )
        del self._entries[victim]
