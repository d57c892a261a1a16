# content_api/models/response.py
from typing import Any, Optional
from pydantic import BaseModel

CODE_OK = 0
CODE_FAIL = -1


class ApiResponse(BaseModel):
    """Envelope returned by every endpoint: numeric code, message, optional data."""
    code: int = CODE_OK
    msg: str = "success"
    data: Optional[Any] = None

    @classmethod
    def ok(cls, data: Any = None, msg: str = "success") -> "ApiResponse":
        return cls(code=CODE_OK, msg=msg, data=data)

    @classmethod
    def fail(cls, msg: str, code: int = CODE_FAIL, data: Any = None) -> "ApiResponse":
        return cls(code=code, msg=msg, data=data)

    @property
    def succeeded(self) -> bool:
        return self.code == CODE_OK
