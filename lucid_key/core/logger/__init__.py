# Path: lucid_key/core/logger/__init__.py
"""
lucid_key Logger Package

IPO-aware logging for the key reader.

Provides separate log streams for:
- INPUT layer (archive extraction, XML decoding, media)
- PROCESS layer (model building, scoring, matching)
- OUTPUT layer (reports, CLI rendering)
"""

from .ipo_logging import (
    IPOFilter,
    setup_ipo_logging,
    get_input_logger,
    get_process_logger,
    get_output_logger,
)

__all__ = [
    'IPOFilter',
    'setup_ipo_logging',
    'get_input_logger',
    'get_process_logger',
    'get_output_logger',
]
