"""Wirerecord configuration models."""

from .config import DecodeConfig

__all__ = ["DecodeConfig"]
