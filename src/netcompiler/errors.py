"""Error kinds raised while binding, compiling and running a project."""


class CompilerError(Exception):
    """Base class for every failure reported back to the caller."""


class BindError(CompilerError):
    """The transport payload is malformed or names an unknown type or category."""


class GraphError(CompilerError):
    """The layer graph cannot be ordered."""


class UnreachableModuleError(GraphError):
    def __init__(self, names: list[str]) -> None:
        self.names = names
        super().__init__(f"Modules not reachable from the input layer: {', '.join(names)}")


class UnsupportedTypeError(CompilerError):
    """A module's type has no matching parameter variant or namespace."""


class PersistenceError(CompilerError):
    """Artifacts could not be written."""


class ProcessError(CompilerError):
    def __init__(
        self,
        message: str,
        returncode: int | None = None,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(message)
