from __future__ import annotations


class TunerError(ValueError):
    """Base class for tuner failures.

    Per-cycle errors (``InvalidInputSize``) mean the current buffer is skipped.
    Configuration errors (everything else) are raised while building the
    configuration and stop startup.
    """


class InvalidInputSize(TunerError):
    pass


class InvalidWindowSize(TunerError):
    pass


class InvalidSampleRate(TunerError):
    pass


class EmptyNoteTable(TunerError):
    pass


class InvalidNoteTable(TunerError):
    pass
