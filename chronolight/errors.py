"""
Error types raised by chronolight.

Only caller-contract violations are raised. Data-quality problems (undecodable
images, black or out-of-locus colors) are reported through validity flags and
confidence scores on the returned records instead.
"""


class ChronolightError(Exception):
    """Base class for chronolight errors."""


class InvalidInputError(ChronolightError, ValueError):
    """Input violates the call contract (empty session, bad hour, bad region)."""
