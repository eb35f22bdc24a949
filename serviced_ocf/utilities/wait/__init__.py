"""
The bounded retry helper shared by the start, stop and health polling
loops.

A predicate is called until it returns a true value, sleeping <delay>
seconds between calls. The loop ends with a TimeOut when the deadline
elapses, and stops early when the predicate raises.
"""
import time

import serviced_ocf.core.exceptions as ex


class Deadline(object):
    """
    A point in time <timeout> seconds from now. A None timeout never
    expires.
    """
    def __init__(self, timeout):
        self.timeout = timeout
        if timeout is None:
            self.limit = None
        else:
            self.limit = time.time() + timeout

    def remaining(self):
        if self.limit is None:
            return None
        return max(self.limit - time.time(), 0)

    def expired(self):
        if self.limit is None:
            return False
        return time.time() >= self.limit

    def __str__(self):
        if self.timeout is None:
            return "no deadline"
        return "%ds deadline" % self.timeout


def wait_for(func, timeout=None, delay=1, errmsg="waited too long"):
    """
    Call <func> until it returns a true value, and return that value.

    Raise ex.TimeOut(<errmsg>) if <timeout> seconds elapse first. The
    predicate is always called at least once, and once more right at
    the deadline, so a condition met during the last sleep is not
    reported as a timeout.
    """
    deadline = Deadline(timeout)
    while True:
        result = func()
        if result:
            return result
        if deadline.expired():
            raise ex.TimeOut(errmsg)
        remaining = deadline.remaining()
        if remaining is None:
            time.sleep(delay)
        else:
            time.sleep(min(delay, remaining))
