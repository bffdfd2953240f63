"""Data models for ado.

Exposes the ordered Status enumeration and the Task dataclass. Statuses
carry no behaviour of their own: each one only needs a sort key (its
integer value), a storage key and a display label, kept as lookup tables
below so the JSON keys stay stable if labels change.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict


class Status(IntEnum):
    """Task status. The integer order is the grouping and cycling order."""
    WONTDO = 0
    TODO = 1
    DONE = 2

    def shifted(self, step: int) -> "Status":
        """Move `step` positions along WONTDO -> TODO -> DONE, clamped."""
        value = max(min(self.value + step, Status.DONE.value), Status.WONTDO.value)
        return Status(value)

    @property
    def key(self) -> str:
        return STATUS_KEYS[self]

    @property
    def label(self) -> str:
        return STATUS_LABELS[self]

    @property
    def marker(self) -> str:
        return STATUS_MARKERS[self]


STATUS_KEYS: Dict[Status, str] = {Status.WONTDO: "wontdo", Status.TODO: "todo", Status.DONE: "done"}
STATUS_LABELS: Dict[Status, str] = {Status.WONTDO: "WON'T DO", Status.TODO: "TO DO", Status.DONE: "DONE"}
STATUS_MARKERS: Dict[Status, str] = {Status.WONTDO: " X ", Status.TODO: "[ ]", Status.DONE: "[x]"}

# storage keys written by earlier releases
LEGACY_KEYS: Dict[str, Status] = {"open": Status.TODO, "wont": Status.WONTDO}


def status_for_key(key: str) -> Status:
    """Resolve a storage key (current or legacy) to a Status; KeyError if unknown."""
    for status, current in STATUS_KEYS.items():
        if current == key:
            return status
    return LEGACY_KEYS[key]


@dataclass
class Task:
    """A single task.

    Fields:
        name: User-supplied text, never empty. Not unique.
        status: One of Status.WONTDO, Status.TODO, Status.DONE.
    """
    name: str
    status: Status = Status.TODO

    def __str__(self) -> str:
        return f"{self.status.marker} {self.name}"
