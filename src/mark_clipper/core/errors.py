"""Exceptions raised inside the content engine."""

from __future__ import annotations


class ContentEngineError(Exception):
    """Base class for content engine failures."""


class ContentInputError(ContentEngineError, ValueError):
    """Input HTML is not a string or exceeds the configured size limit."""


class ConfigError(ContentEngineError):
    """A configuration file could not be read or validated."""
