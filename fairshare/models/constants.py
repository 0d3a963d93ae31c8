"""Domain constants used for request validation."""

from typing import Literal, Set

from .domain import ACCEPTED_SPLIT_MODES

Role = Literal["me", "partner"]
ROLES: Set[str] = {"me", "partner"}
SPLIT_MODES: Set[str] = set(ACCEPTED_SPLIT_MODES)
