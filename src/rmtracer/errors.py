"""Exceptions raised while setting up a render.

All validation happens before any kernel runs, and kernels never raise.
Exhausting a preallocated buffer, or rendering before setup, raises
RuntimeError instead.
"""


class ConfigurationError(ValueError):
    """Raised when a camera, scene or render setting is invalid.

    Examples are a non-positive sphere radius, a zero sample count or a
    scene file with an unknown object type.
    """
