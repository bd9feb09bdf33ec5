from enum import Enum


class SendMode(str, Enum):
    """
    Qué se adjunta al enviar una placa aceptada.
    Se resuelve una sola vez al construir el servicio.
    """
    NONE = "none"
    FULL_FRAME = "full_frame"
    CROPPED_PLATE = "cropped_plate"

    @classmethod
    def parse(cls, value: "str | SendMode") -> "SendMode":
        if isinstance(value, SendMode):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"send_mode inválido: {value!r}") from None
