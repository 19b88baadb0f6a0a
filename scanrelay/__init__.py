"""
scanrelay - forwards barcodes from a USB keyboard-mode scanner to an HTTP server.
"""

__version__ = '1.0.0'
