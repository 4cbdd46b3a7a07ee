"""Exceptions raised while loading descriptions and rendering clients."""


class GenerationError(Exception):
    """Base error for a client that cannot be generated."""

    def __init__(self, message: str, endpoint: str | None = None):
        self.endpoint = endpoint
        full_message = message if not endpoint else f"[{endpoint}] {message}"
        super().__init__(full_message)


class ConstantParameterError(GenerationError):
    """Raised when a constant parameter carries no default literal."""

    def __init__(self, parameter: str, endpoint: str | None = None):
        self.parameter = parameter
        super().__init__(f"Constant parameter '{parameter}' has no default value", endpoint)


class TypeNameError(GenerationError):
    """Raised when a type descriptor cannot be turned into a name."""

    def __init__(self, context: str, endpoint: str | None = None):
        self.context = context
        super().__init__(f"Type cannot be named ({context})", endpoint)


class DescriptionError(Exception):
    """Raised when an endpoint description document is unusable."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        full_message = message if not path else f"[{path}] {message}"
        super().__init__(full_message)
