# sqlsandbox/errors.py


class SandboxError(Exception):
    """Base error. Each subclass maps to one HTTP status for the JSON error body."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(SandboxError):
    status_code = 400


class UpstreamError(SandboxError):
    pass


class MalformedUpstreamResponse(SandboxError):
    pass


class DatabaseInitError(SandboxError):
    pass


class SchemaError(SandboxError):
    pass


class SeedError(SandboxError):
    def __init__(self, message: str, position: int, statement: str):
        super().__init__(message)
        self.position = position
        self.statement = statement


class QueryError(SandboxError):
    pass
