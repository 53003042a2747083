"""CLI utility functions"""

from .output import (
    console,
    format_outcome,
    format_manifest,
    format_descriptors,
    format_registry,
    print_error,
    print_warning,
    print_success,
)

__all__ = [
    'console',
    'format_outcome',
    'format_manifest',
    'format_descriptors',
    'format_registry',
    'print_error',
    'print_warning',
    'print_success',
]
