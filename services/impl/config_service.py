"""
Config Service Implementation.

Centralized configuration management for the check-in terminal.
Loads configuration from application_config.json organized by section.

Follows:
- SRP: Only handles configuration management
- DIP: Provides configuration to other services via interface
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional


from services.interfaces.config_service_interface import IConfigService


logger = logging.getLogger(__name__)


class ConfigService(IConfigService):
    """
    Implementation of IConfigService.

    Loads and manages terminal configuration from application_config.json.
    Configuration is organized by section (terminal, s1_camera, lookup, ...).
    """

    def __init__(self, configPath: str = "config/application_config.json"):
        """
        Initialize ConfigService.

        Args:
            configPath: Path to the configuration file.

        Raises:
            RuntimeError: If the file is missing or not a JSON object.
        """
        self._config: Dict[str, Any] = {}
        self._configPath = Path(configPath)
        self._debugEnabled = False

        if not self.loadConfig(configPath):
            raise RuntimeError(f"Failed to load configuration from: {configPath}")

    def loadConfig(self, configPath: str) -> bool:
        """Load configuration from JSON file."""
        try:
            path = Path(configPath)
            if not path.exists():
                logger.error(f"Config file not found: {configPath}")
                return False

            with open(path, 'r', encoding='utf-8') as f:
                config = json.load(f)

            if not isinstance(config, dict):
                logger.error(f"Config root must be a JSON object: {configPath}")
                return False

            self._config = config
            self._debugEnabled = bool(self.get("debug.enabled", False))

            logger.info(f"Configuration loaded from: {path.absolute()}")
            return True

        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in config file: {e}")
            return False
        except Exception as e:
            logger.error(f"Failed to load config: {e}")
            return False

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Generic Config Access
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by key with dot notation support.

        Examples:
            get("terminal.department") -> "Department of Motor Traffic"
            get("lookup.timeoutSeconds") -> 5.0
            get("s2_qr_scan.backend") -> "zxing"
        """
        value = self._config
        for part in key.split('.'):
            if not isinstance(value, dict):
                return default
            value = value.get(part)
            if value is None:
                return default
        return value

    def getServiceConfig(self, serviceName: str) -> Dict[str, Any]:
        """
        Get all configuration for a specific section.

        Args:
            serviceName: Section name (e.g., "s1_camera", "lookup")

        Returns:
            Configuration dictionary for the section.
        """
        config = self._config.get(serviceName, {})
        return config if isinstance(config, dict) else {}

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Debug Settings
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def getDebugBasePath(self) -> str:
        """Get base path for debug output."""
        return self.get("debug.basePath", "output/debug")

    def isDebugEnabled(self) -> bool:
        """Check if debug mode is enabled."""
        return self._debugEnabled

    def setDebugEnabled(self, enabled: bool) -> None:
        """Enable or disable debug mode at runtime."""
        self._debugEnabled = enabled
        logger.info(f"Debug mode {'enabled' if enabled else 'disabled'}")

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Terminal Settings
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def getTerminalId(self) -> str:
        """Get the identifier written to audit entries."""
        return self.get("terminal.terminalId", "reception-01")

    def getTerminalDepartment(self) -> str:
        """Get the department served by this terminal."""
        return self.get("terminal.department", "")

    def getRecentScanCapacity(self) -> int:
        """Get how many recent raw scans are remembered for deduplication."""
        return int(self.get("terminal.recentScanCapacity", 5))

    def getCameraPollInterval(self) -> float:
        """Get the delay between camera scan attempts in seconds."""
        return float(self.get("terminal.cameraPollIntervalSeconds", 0.2))

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # S1 Camera Settings
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def getCameraIndex(self) -> int:
        """Get the default camera index."""
        return int(self.get("s1_camera.cameraIndex", 0))

    def getFrameWidth(self) -> int:
        """Get camera frame width."""
        return int(self.get("s1_camera.frameWidth", 1280))

    def getFrameHeight(self) -> int:
        """Get camera frame height."""
        return int(self.get("s1_camera.frameHeight", 720))

    def getMaxCameraSearch(self) -> int:
        """Get max camera search count."""
        return int(self.get("s1_camera.maxCameraSearch", 4))

    def getMaxReadFailures(self) -> int:
        """Get failed reads in a row after which the camera counts as disconnected."""
        return int(self.get("s1_camera.maxReadFailures", 30))

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # S2 QR Scan Settings
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def getQrBackend(self) -> str:
        """
        Get QR decoding backend.

        Returns:
            str: "zxing" (default) or "pyzbar".
        """
        return str(self.get("s2_qr_scan.backend", "zxing")).lower()

    def getZxingTryRotate(self) -> bool:
        return bool(self.get("s2_qr_scan.zxing.tryRotate", True))

    def getZxingTryDownscale(self) -> bool:
        return bool(self.get("s2_qr_scan.zxing.tryDownscale", True))

    def getMaxUploadBytes(self) -> int:
        """Get the largest accepted uploaded image size in bytes."""
        return int(self.get("s2_qr_scan.maxUploadBytes", 10 * 1024 * 1024))

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # S3 Verification Settings
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def getSigningSecret(self) -> Optional[str]:
        """
        Get the shared secret for signed passes.

        Returns:
            Optional[str]: Secret, or None when pass signatures are not checked.
        """
        secret = self.get("s3_verification.signingSecret")
        return secret or None

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Lookup Settings
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def getLookupBaseUrl(self) -> str:
        """Get the booking system base URL."""
        return self.get("lookup.baseUrl", "http://localhost:3000")

    def getLookupVerifyPath(self) -> str:
        """Get the verification endpoint path."""
        return self.get("lookup.verifyPath", "/api/public/verify-appointment")

    def getLookupTimeout(self) -> float:
        """Get lookup timeout in seconds."""
        return float(self.get("lookup.timeoutSeconds", 5.0))

    def getLookupApiToken(self) -> Optional[str]:
        """Get optional bearer token for the lookup endpoint."""
        token = self.get("lookup.apiToken")
        return token or None

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Audit Settings
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def isAuditEnabled(self) -> bool:
        """Check if check-in results are written to the audit file."""
        return bool(self.get("audit.enabled", False))

    def getAuditFilePath(self) -> str:
        """Get the audit JSON-lines file path."""
        return self.get("audit.filePath", "output/audit/checkins.jsonl")

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Presenter Settings
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def getAutoClearSeconds(self) -> float:
        """Get how long a result stays on screen (0 disables auto-clear)."""
        return float(self.get("presenter.autoClearSeconds", 10.0))

    def isColorOutputEnabled(self) -> bool:
        """Check if results are printed with ANSI colours."""
        return bool(self.get("presenter.colorOutput", True))
