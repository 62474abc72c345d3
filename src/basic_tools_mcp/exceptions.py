# Custom exceptions for basic-tools-mcp

class BasicToolsError(Exception):
    """Base exception for all application-specific errors."""
    pass


class LexicalError(BasicToolsError):
    """Raised by the tokenizer for an unterminated string, regex or char literal."""
    def __init__(self, message: str, offset: int, line: int, column: int):
        self.message = message
        self.offset = offset
        self.line = line
        self.column = column
        super().__init__(f"{message} at line {line}, column {column}")


class StructuralInvalidError(BasicToolsError):
    """Raised when text has unmatched or mismatched delimiters."""
    def __init__(self, issue):
        self.issue = issue
        super().__init__(str(issue))


class CursorError(BasicToolsError):
    """Raised when a cursor operation is applied at the end marker or an invalid path."""
    pass


class ResultError(BasicToolsError):
    """Raised when unwrapping a failed Result."""
    def __init__(self, error):
        self.error = error
        super().__init__(getattr(error, "message", str(error)))


class ConfigError(BasicToolsError):
    """Raised for configuration-related problems."""
    pass


class NreplError(BasicToolsError):
    """Raised when an nREPL connection or exchange fails."""
    def __init__(self, host: str, port: int, message: str):
        self.host = host
        self.port = port
        self.message = message
        super().__init__(f"nREPL {host}:{port}: {message}")


class FormatterError(BasicToolsError):
    """Raised when an external formatter cannot be run."""
    def __init__(self, command: str, message: str):
        self.command = command
        self.message = message
        super().__init__(f"{command}: {message}")
