from typing import Any, Optional


class BaseError(Exception):
    pass


class TypeMismatchError(BaseError):
    def __init__(self, path: Any, source: str, target: str, detail: Optional[str] = None):
        self.path = str(path)
        self.source = source
        self.target = target
        message = f"Cannot coerce {source} to {target} at path '{self.path}'"
        if detail:
            message = f"{message}: {detail}"
        super(TypeMismatchError, self).__init__(message)


class ShapeResolutionError(BaseError):
    def __init__(self, shape: Any, reason: str):
        self.shape = shape
        name = getattr(shape, "__name__", repr(shape))
        super(ShapeResolutionError, self).__init__(f"Cannot use {name} as a record shape: {reason}")


class FieldPathError(BaseError, ValueError):
    def __init__(self, path: Any):
        super(FieldPathError, self).__init__(f"Malformed field path: {path!r}")


class InvalidLifecycleUseError(BaseError):
    pass


class RejectedWorkError(BaseError):
    pass


class BackingFailureError(BaseError):
    pass
