"""Failure taxonomy for the generation and allocation pipeline.

Only ``ValidationError`` and ``FallbackFailure`` ever reach the caller. The
other failures are absorbed by falling through to the next pipeline stage.
"""

from __future__ import annotations


class LabGenError(Exception):
	"""Base class for every error raised by the pipeline."""


class ValidationError(LabGenError):
	"""Caller input violates the stated bounds; no generation is attempted."""


class GenerationUnavailable(LabGenError):
	"""The generation backend errored or returned empty content."""


class MalformedResponse(LabGenError):
	"""The backend returned text that could not be parsed as JSON."""


class InvalidSchema(LabGenError):
	"""The parsed payload lacks a ``questions`` sequence."""


class FallbackFailure(LabGenError):
	"""The deterministic fallback generator raised. Fatal to the request."""


class ArchiveFailure(LabGenError):
	"""Persisting a history record failed. Logged and discarded."""
