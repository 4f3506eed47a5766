"""Users and the capabilities they act under."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Role(Enum):
    CUSTOMER = "CUSTOMER"
    SELLER = "SELLER"


@dataclass
class User:
    """An authenticated identity: either a shopper or a seller.

    Credentials are managed outside this package; only the fields needed
    for ordering and notifications live here.
    """

    id: int | None
    email: str
    full_name: str
    role: Role = Role.CUSTOMER
