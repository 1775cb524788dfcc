"""
Error types raised by the plan engine.
"""


class PlanEngineError(Exception):
    """Base class for plan engine failures."""


class GenerationFailure(PlanEngineError):
    """The text generator call failed or returned no text."""


class ParseFailure(PlanEngineError):
    """The generator response contained no recognizable week sections."""


class InvalidPreferences(PlanEngineError, ValueError):
    """Preferences were rejected before any network call."""


class PlanNotFound(PlanEngineError, LookupError):
    """No stored plan matches the requested id."""
