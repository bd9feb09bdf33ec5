from abc import ABC, abstractmethod

class ISiteRepository(ABC):
    """
    Identificador de sitio persistido localmente.
    Sólo se usa para anotar las detecciones enviadas.
    """

    @abstractmethod
    def get_site_id(self) -> str:
        pass

    @abstractmethod
    def save_site_id(self, site_id: str) -> None:
        pass
