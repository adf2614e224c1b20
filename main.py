"""
GovLink Check-in Terminal

Main entry point for the reception check-in terminal.
Uses CheckinOrchestrator to initialize all services following SOLID principles.

Architecture:
- CheckinOrchestrator: Reads config and creates all services with parameters
- Services: Receive parameters, create core components internally
- ResultPresenter: Prints each decision for the reception operator
"""

import sys
import os
import asyncio
import logging
import argparse
from pathlib import Path
from typing import List, Optional

from core.interfaces.validation_interface import ValidationResult
from services.interfaces.scan_service_interface import UploadedImageSource
from terminal.checkin_orchestrator import CheckinOrchestrator


def setupLogging(debugMode: bool = False) -> None:
    """
    Setup application logging.

    Args:
        debugMode: If True, set log level to DEBUG.
    """
    level = logging.DEBUG if debugMode else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if debugMode else logging.WARNING)


def parseArgs(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Reception terminal - validate GovLink appointment QR passes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  govlink-checkin --camera 0
  govlink-checkin --image pass.png --department "Motor Traffic"
  govlink-checkin --qr-text '{"ref":"GV-001","dept":"Motor Traffic",...}'

Exit codes:
  0   last pass was admitted
  1   last pass was rejected, or nothing was validated
  130 interrupted by user
        """
    )

    parser.add_argument(
        "--config", "-c",
        type=str,
        default="config/application_config.json",
        help="Path to configuration file"
    )

    parser.add_argument(
        "--department",
        type=str,
        default=None,
        help="Department served by this terminal (overrides config)"
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--image", "-i",
        type=str,
        default=None,
        help="Validate the QR code in an image file and exit"
    )
    source.add_argument(
        "--qr-text", "-t",
        type=str,
        default=None,
        help="Validate a raw QR payload string and exit"
    )
    source.add_argument(
        "--camera",
        type=int,
        default=None,
        help="Scan continuously with the camera at this index (default mode)"
    )

    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Enable debug mode (saves output to output/debug/)"
    )

    return parser.parse_args(argv)


async def runTerminal(args: argparse.Namespace) -> Optional[ValidationResult]:
    """
    Run one terminal session for the selected input.

    Args:
        args: Parsed command line arguments.

    Returns:
        The last validation result shown, if any.
    """
    logger = logging.getLogger(__name__)
    orchestrator = CheckinOrchestrator(args.config, terminalDepartment=args.department)
    if args.debug:
        orchestrator.setDebugEnabled(True)

    try:
        if args.qr_text is not None:
            return await orchestrator.handleRawScan(args.qr_text)

        if args.image is not None:
            imagePath = Path(args.image)
            if not imagePath.is_file():
                logger.error(f"Image file not found: {args.image}")
                return None
            source = UploadedImageSource(data=imagePath.read_bytes(), fileName=imagePath.name)
            _, result = await orchestrator.scanSource(source)
            return result

        return await orchestrator.runCamera(cameraIndex=args.camera)

    finally:
        await orchestrator.shutdown()


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    args = parseArgs(argv)

    setupLogging(debugMode=args.debug or os.environ.get("DEBUG", "").lower() == "true")
    logger = logging.getLogger(__name__)
    logger.info("Starting GovLink check-in terminal")

    try:
        result = asyncio.run(runTerminal(args))
        sys.exit(0 if result is not None and result.admitted else 1)

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(130)
    except RuntimeError as e:
        logger.error(f"Terminal failed to start: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
