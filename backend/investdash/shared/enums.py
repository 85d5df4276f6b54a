from __future__ import annotations

from enum import Enum


class Env(str, Enum):
    dev = "dev"
    prod = "prod"
    test = "test"


class UserRole(str, Enum):
    normal_user = "normal_user"
    super_user = "super_user"


class InvestmentStatus(str, Enum):
    active = "active"
    matured = "matured"
    terminated = "terminated"


class InvestmentType(str, Enum):
    """Known investment types. The field itself accepts any string."""

    lumpsum = "Lumpsum"
    buy_and_hold = "Buy and Hold"
    lumpsum_regular = "Lumpsum/Regular"


class SessionState(str, Enum):
    uninitialized = "uninitialized"
    loading = "loading"
    ready = "ready"
    error = "error"
