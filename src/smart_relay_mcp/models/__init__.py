"""Data models for session options."""

from .options import SessionOptions
