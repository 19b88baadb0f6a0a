#!/usr/bin/env python3
"""
Main entry point for scanrelay.

Usage:
    scanrelay                                  # Use settings.yaml / environment
    scanrelay --config /etc/scanrelay/settings.yaml
    scanrelay --device /dev/input/event3 --server http://host/scan
"""

import argparse
import logging
import signal
import sys
from typing import Optional, List

from .core import ScannerDevice, BarcodeDecoder, BarcodeDispatcher, ScanRelay
from .core.errors import ConfigError, DeviceError
from .logger import setup_logging, log_exception
from .settings import Settings, load_config


logger = logging.getLogger('scanrelay')


def signal_handler(signum, frame):
    """Handle shutdown signals."""
    logger.info("Shutdown requested (signal %d)", signum)
    sys.exit(0)


def build_settings(args: argparse.Namespace) -> Settings:
    """
    Resolve settings from file, environment and command line.

    Raises:
        ConfigError: If settings are missing or invalid.
    """
    config = load_config(args.config)
    settings = Settings.from_config(config)

    if args.device:
        settings.device_path = args.device
    if args.server:
        settings.server_address = args.server
    if args.log_level:
        settings.log_level = args.log_level.upper()

    settings.validate()
    return settings


def run(settings: Settings) -> None:
    """
    Open the scanner and relay scans until a fatal error.

    Raises:
        DeviceError: If the scanner cannot be opened, grabbed or read.
    """
    device = ScannerDevice.open(settings.device_path)
    try:
        device.grab()

        decoder = BarcodeDecoder(
            max_length=settings.max_length,
            unmapped_policy=settings.unmapped_policy,
            overflow_policy=settings.overflow_policy,
        )
        dispatcher = BarcodeDispatcher(settings.server_address, timeout=settings.http_timeout)
        relay = ScanRelay(device, decoder, dispatcher)

        logger.info("Decoder: max_length=%d, unmapped=%s, overflow=%s",
                    decoder.max_length, decoder.unmapped_policy.value,
                    decoder.overflow_policy.value)
        logger.info("Forwarding barcodes to %s", dispatcher.server_address)

        try:
            relay.run()
        finally:
            logger.info("Relay stopped: %s", relay.get_status())
    finally:
        device.close()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description='Forward barcodes from a USB scanner to an HTTP server')
    parser.add_argument('--config', default=None,
                        help='Path to settings YAML file')
    parser.add_argument('--device', default=None,
                        help='Scanner input device path (overrides SCANNER_DEVICE_PATH)')
    parser.add_argument('--server', default=None,
                        help='HTTP server address (overrides HTTP_SERVER_ADDRESS)')
    parser.add_argument('--log-level', default=None,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        type=str.upper,
                        help='Logging level')
    args = parser.parse_args(argv)

    setup_logging(args.log_level or 'INFO')

    # Setup signal handlers
    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        settings = build_settings(args)
    except ConfigError as e:
        logger.critical("Configuration error: %s", e)
        return 1

    try:
        setup_logging(settings.log_level, settings.log_file)
    except (ValueError, OSError) as e:
        logger.critical("Logging setup failed: %s", e)
        return 1

    try:
        run(settings)
    except DeviceError as e:
        log_exception(logger, "Scanner device error", e, level=logging.CRITICAL)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
