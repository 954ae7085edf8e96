"""Shared models for gitchain."""
from dataclasses import dataclass


@dataclass
class TagRef:
    name: str
    created: str
