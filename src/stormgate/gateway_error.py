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

from enum import IntEnum


class ErrorCode(IntEnum):
    """Status codes reported by the gateway"""

    NONE = 0
    ALLOCATION_FAILURE = 101
    PROPERTY_OUT_OF_RANGE = 501
    NOT_OPEN = 502
    SIMULATION_RUNNING = 503
    WRONG_OBJECT_TYPE = 504
    OBJECT_INDEX_OUT_OF_RANGE = 505
    UNDEFINED_LID_GROUP = 506
    SIMULATION_NOT_STARTED = 507
    INVALID_PARAMETER = 508


ERROR_MESSAGES = {
    ErrorCode.NONE: "",
    ErrorCode.ALLOCATION_FAILURE: "ERROR 101: memory allocation error.",
    ErrorCode.PROPERTY_OUT_OF_RANGE: "API Error 501: property or object type out of range.",
    ErrorCode.NOT_OPEN: "API Error 502: project not open.",
    ErrorCode.SIMULATION_RUNNING: (
        "API Error 503: cannot modify parameter while simulation is running."
    ),
    ErrorCode.WRONG_OBJECT_TYPE: "API Error 504: wrong object type.",
    ErrorCode.OBJECT_INDEX_OUT_OF_RANGE: "API Error 505: object index out of range.",
    ErrorCode.UNDEFINED_LID_GROUP: "API Error 506: no LID unit defined for subcatchment.",
    ErrorCode.SIMULATION_NOT_STARTED: "API Error 507: simulation not started.",
    ErrorCode.INVALID_PARAMETER: "API Error 508: invalid parameter value.",
}


def get_error_message(code):
    """Return the message attached to a status code"""
    try:
        return ERROR_MESSAGES[ErrorCode(code)]
    except ValueError:
        return f"Unknown error code {code}"


class GatewayError(Exception):
    """General error class.
    Every subclass carries the status code reported by the status facade.
    """

    code = ErrorCode.NONE

    def __init__(self, msg=None):
        if msg is None:
            msg = ERROR_MESSAGES[self.code]
        self.msg = msg
        super().__init__(msg)

    def __str__(self):
        return repr(self.msg)


class AllocationError(GatewayError):
    """Raised when a result buffer cannot be allocated"""

    code = ErrorCode.ALLOCATION_FAILURE


class PropertyOutOfRangeError(GatewayError):
    """Unknown property, layer or object type identifier"""

    code = ErrorCode.PROPERTY_OUT_OF_RANGE


class NotOpenError(GatewayError):
    code = ErrorCode.NOT_OPEN


class SimulationRunningError(GatewayError):
    """Raised when a structural parameter is modified during a run"""

    code = ErrorCode.SIMULATION_RUNNING


class NotStartedError(GatewayError):
    code = ErrorCode.SIMULATION_NOT_STARTED


class WrongObjectTypeError(GatewayError):
    code = ErrorCode.WRONG_OBJECT_TYPE


class ObjectIndexError(GatewayError):
    code = ErrorCode.OBJECT_INDEX_OUT_OF_RANGE


class UndefinedLidGroupError(GatewayError):
    code = ErrorCode.UNDEFINED_LID_GROUP


class ValidationError(GatewayError):
    """Raised when re-validation of an edited object fails"""

    code = ErrorCode.INVALID_PARAMETER


class GatewayFatal(GatewayError):
    """Raised by the messenger on fatal errors"""

    code = ErrorCode.INVALID_PARAMETER
