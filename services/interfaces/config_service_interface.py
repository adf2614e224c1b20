"""
Config Service Interface Module.

Defines the interface for centralized configuration management.
The config service loads the terminal settings and hands plain values
to the orchestrator, which passes them on to each service.

Follows:
- SRP: Only handles configuration management
- DIP: Other services depend on this abstraction
"""

from abc import ABC, abstractmethod
from typing import Any, Dict


class IConfigService(ABC):
    """
    Interface for configuration management.

    Supports dot notation for nested config access.
    """

    @abstractmethod
    def loadConfig(self, configPath: str) -> bool:
        """
        Load configuration from a JSON file.

        Args:
            configPath: Path to the configuration file.

        Returns:
            bool: True if loaded successfully, False otherwise.
        """
        pass

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value by key.

        Supports dot notation for nested access:
        - "terminal.department" -> config["terminal"]["department"]
        - "lookup.timeoutSeconds" -> config["lookup"]["timeoutSeconds"]

        Args:
            key: Configuration key (supports dot notation).
            default: Default value if key not found.

        Returns:
            Configuration value or default.
        """
        pass

    @abstractmethod
    def getServiceConfig(self, serviceName: str) -> Dict[str, Any]:
        """
        Get all configuration for a specific section.

        Args:
            serviceName: Section name (e.g., "s1_camera", "lookup").

        Returns:
            Dictionary with section-specific configuration.
        """
        pass

    @abstractmethod
    def getDebugBasePath(self) -> str:
        pass

    @abstractmethod
    def isDebugEnabled(self) -> bool:
        pass

    @abstractmethod
    def setDebugEnabled(self, enabled: bool) -> None:
        pass
