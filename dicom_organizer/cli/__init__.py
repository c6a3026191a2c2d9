"""Command line interface for DICOM Organizer."""

from .main import main

__all__ = ["main"]
