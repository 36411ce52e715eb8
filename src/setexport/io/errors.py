"""
Custom exceptions for the setexport.io module.

Purpose
- Provide IO-layer specific error types for file-system concerns.
- Keep setexport.core.errors as the source of truth for configuration, discovery and scan errors.

Boundaries
- IoWriteError: scratch write, header rewrite, fsync or atomic rename failed.
- IoManifestError: run manifest write or load failed.

Notes
- These exceptions do not perform any IO and are stdlib-only.
"""

from __future__ import annotations


class IoError(Exception):
    """
    Base class for IO-related errors in setexport.io.

    Notes:
        Use this as a catch-all for file-system failures, distinct from setexport.core errors.
    """


class IoWriteError(IoError):
    """
    Raised when an export file cannot be completed.

    Notes:
        The finalize path is staging write -> fsync -> os.replace(staging, final). Failures at
        any step surface as IoWriteError (with best-effort cleanup of scratch and staging files).
    """


class IoManifestError(IoError):
    """Raised when the run manifest cannot be written or parsed."""
