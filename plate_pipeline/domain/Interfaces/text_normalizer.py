from typing import Protocol

class ITextNormalizer(Protocol):
    def normalize(self, text: str) -> str:
        """Devuelve la forma canónica del texto, o "" si se rechaza."""
        ...
