from typing import Protocol

class INotifier(Protocol):
    """
    Destino de los mensajes visibles al usuario (pantalla, logs...).
    """
    def plate_detected(self, plate: str) -> None: ...

    def status(self, message: str) -> None: ...
