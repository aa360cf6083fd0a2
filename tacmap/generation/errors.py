class MapGenerationError(ValueError):
    """Raised for generator inputs that cannot describe a map.

    Carries the offending ``field`` and a short machine-readable ``code`` so
    callers can report the problem without parsing the message.
    """

    def __init__(self, field: str, message: str, code: str):
        super().__init__(message)
        self.field = field
        self.message = message
        self.code = code


class InvalidRoomError(MapGenerationError):
    pass


__all__ = ["MapGenerationError", "InvalidRoomError"]
