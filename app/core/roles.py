# app/core/roles.py
from enum import Enum


class UserRole(str, Enum):
    CLIENT = "CLIENT"
    EMPLOYEE = "EMPLOYEE"
    ADMIN = "ADMIN"


STAFF_ROLES = frozenset({UserRole.EMPLOYEE, UserRole.ADMIN})
ALL_ROLES = frozenset(UserRole)
