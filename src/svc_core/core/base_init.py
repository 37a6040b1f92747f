from abc import ABC, abstractmethod
from typing import List
from ..models.service_info import ServiceInfo

class BaseInitManager(ABC):
    """
    Abstract base class for Init System Managers (systemd, OpenRC).
    Responsibility: query and control services on the running host.
    """

    name: str = ""

    @abstractmethod
    def list_services(self, pattern: str = "") -> List[ServiceInfo]:
        """
        Returns all known services with their running state.

        Args:
            pattern: Shell glob matched against bare service names.
                "" or "*" matches everything.
        """
        pass

    @abstractmethod
    def is_service_enabled(self, name: str) -> bool:
        """
        Checks whether the service is started at boot.
        """
        pass

    @abstractmethod
    def is_service_running(self, name: str) -> bool:
        """
        Checks whether the service is currently active.
        """
        pass

    @abstractmethod
    def enable_service(self, name: str) -> None:
        pass

    @abstractmethod
    def disable_service(self, name: str) -> None:
        pass

    @abstractmethod
    def start_service(self, name: str) -> None:
        pass

    @abstractmethod
    def stop_service(self, name: str) -> None:
        pass

    @abstractmethod
    def reload(self) -> None:
        """
        Makes the init system pick up changed service definitions.
        """
        pass
