from dataclasses import dataclass
from typing import Any, Optional

VALIDATION = 'validation'
NOT_FOUND = 'not_found'
CONFLICT = 'conflict'
STORE = 'store'
AUTH = 'auth'

GENERIC_STORE_MESSAGE = 'Something went wrong while saving your data. Please try again.'


@dataclass(frozen=True)
class OperationResult:
    """
    Outcome of a repository or service call.

    Expected failures (bad input, unknown id, store I/O) are returned as a
    failed result instead of being raised.
    """

    ok: bool
    value: Any = None
    error: Optional[str] = None
    field: Optional[str] = None
    code: Optional[str] = None

    @classmethod
    def success(cls, value=None):
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error, code=VALIDATION, field=None):
        return cls(ok=False, error=error, code=code, field=field)

    @classmethod
    def invalid(cls, error, field=None):
        return cls.failure(error, code=VALIDATION, field=field)

    @classmethod
    def not_found(cls, error):
        return cls.failure(error, code=NOT_FOUND)

    @classmethod
    def conflict(cls, error, field=None):
        return cls.failure(error, code=CONFLICT, field=field)

    @classmethod
    def store_failure(cls, error=GENERIC_STORE_MESSAGE):
        return cls.failure(error, code=STORE)

    def __bool__(self):
        return self.ok

    def as_dict(self):
        if self.ok:
            return {'success': True}
        payload = {'success': False, 'message': self.error, 'code': self.code}
        if self.field:
            payload['field'] = self.field
        return payload
