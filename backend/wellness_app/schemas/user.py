from pydantic import BaseModel
from typing import Optional

from .common import CamelModel


class LoginIn(BaseModel):
    email: str
    password: str


class UserOut(CamelModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    role: str
