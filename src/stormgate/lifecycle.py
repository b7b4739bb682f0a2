# coding=utf8
"""
Copyright (C) 2025 Laurent Courty

This program is free software; you can redistribute it and/or
modify it under the terms of the GNU General Public License
as published by the Free Software Foundation; either version 2
of the License, or (at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
GNU General Public License for more details.
"""

from enum import StrEnum
from typing import Callable

from stormgate.gateway_error import NotOpenError, SimulationRunningError, NotStartedError


class LifecycleState(StrEnum):
    CLOSED = "closed"
    OPEN = "open"
    STARTED = "started"


class LifecycleGuard:
    """Decide which classes of operations are legal.
    The guard only observes the state, transitions belong to the project.
    """

    def __init__(self, get_state: Callable[[], LifecycleState]):
        self._get_state = get_state

    @property
    def state(self) -> LifecycleState:
        return self._get_state()

    @property
    def is_open(self) -> bool:
        return self.state in (LifecycleState.OPEN, LifecycleState.STARTED)

    @property
    def is_started(self) -> bool:
        return self.state == LifecycleState.STARTED

    def check_open(self) -> None:
        """Read operations and live forcing"""
        if not self.is_open:
            raise NotOpenError()

    def check_not_started(self) -> None:
        """Structural write operations"""
        self.check_open()
        if self.is_started:
            raise SimulationRunningError()

    def check_started(self) -> None:
        """Instantaneous results"""
        self.check_open()
        if not self.is_started:
            raise NotStartedError()
