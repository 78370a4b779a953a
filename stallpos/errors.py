"""
Application Errors
Exceptions raised by the storage and service layers and mapped to JSON responses
"""


class PosError(Exception):
    """Base class for errors surfaced to API callers"""
    status_code = 500

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {'error': self.message}


class ValidationError(PosError):
    """Bad input, rejected before any storage mutation"""
    status_code = 400

    @classmethod
    def from_pydantic(cls, exc, prefix='Invalid data'):
        """Build a readable message from a pydantic ValidationError"""
        details = []
        for error in exc.errors():
            location = '.'.join(str(part) for part in error.get('loc', ()))
            message = error.get('msg', 'invalid value').removeprefix('Value error, ')
            details.append(f"{location}: {message}" if location else message)
        return cls(f"{prefix}: {'; '.join(details)}")


class NotFoundError(PosError):
    """Unknown id, or no record for a date (an expected state)"""
    status_code = 404


class ConflictError(PosError):
    """Operation not allowed in the current state"""
    status_code = 400


class AuthenticationError(PosError):
    status_code = 401
