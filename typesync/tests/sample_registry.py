"""
Types recorded in the process-wide registry when this module is imported.
"""

from __future__ import annotations

from typesync.datatype import sid
from typesync.registry import export_type

from .factories import BOOL, STRING, named, struct


@export_type(sid("User", "tests.User"))
def user(types):
    return named("User", struct("User", active=BOOL))


@export_type(sid("Account", "tests.Account"))
def account(types):
    return named("Account", struct("Account", name=STRING, owner=types.reference(user.type_id, user)))
