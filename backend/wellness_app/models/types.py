from sqlalchemy import String
from sqlalchemy.types import TypeDecorator


class CaseInsensitiveEnum(TypeDecorator):
    """Stores an enum member's value as plain text.

    Binds accept the member or any casing of its value (``"No-Show"``);
    reads always come back as the member.
    """

    impl = String
    cache_ok = True

    def __init__(self, enum_cls, length: int = 32):
        super().__init__(length)
        self.enum_cls = enum_cls

    def _coerce(self, value):
        if isinstance(value, self.enum_cls):
            return value
        return self.enum_cls(str(value).strip().lower())

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return self._coerce(value).value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return self._coerce(value)
