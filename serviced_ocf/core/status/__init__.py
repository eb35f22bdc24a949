"""
This module defines the point-in-time states a resource can be evaluated
to, and the functions to convert a state to its printable form.

States are never persisted. They are derived each time from the process
table, the pid marker and the mount table.
"""

UP = 0
DOWN = 1
WARN = 2
UNDEF = 5

STATUS_STR = {
    UP: 'up',
    DOWN: 'down',
    WARN: 'warn',
    UNDEF: 'undef',
}

# running, but failing its health check
DEGRADED = WARN


def status_str(val):
    """
    Return the human readable status string.
    """
    if val not in STATUS_STR:
        return
    return STATUS_STR[val]
