"""Exceptions raised by the ray caster."""


class SceneConfigurationError(ValueError):
    """Raised when a scene description cannot be rendered.

    Reported before any pixel work begins, e.g. for a portrait sensor
    (width < height) or a field of view outside (0, 180) degrees.
    """

    pass
