"""
The pid marker: a file holding the pid a resource last observed running.

The marker is only a hint. Its presence does not prove the process runs,
and its absence does not prove it is stopped.
"""
import os

from serviced_ocf.utilities.files import makedirs


def parse_pid(buff):
    """
    Return the pid written on the first non-blank line of <buff>, or None
    if <buff> does not hold a positive integer.
    """
    if buff is None:
        return
    for line in buff.splitlines():
        line = line.strip()
        if not line:
            continue
        try:
            pid = int(line)
        except ValueError:
            return
        if pid <= 0:
            return
        return pid
    return


class PidMarker(object):
    def __init__(self, path):
        self.path = path

    def __str__(self):
        return self.path

    def exists(self):
        return os.path.exists(self.path)

    def read(self):
        """
        Return the recorded pid, or None if the marker is absent or
        unreadable.
        """
        try:
            with open(self.path, "r") as ofile:
                return parse_pid(ofile.read())
        except (IOError, OSError):
            return

    def write(self, pid):
        makedirs(os.path.dirname(self.path))
        tmpf = self.path + ".tmp"
        with open(tmpf, "w") as ofile:
            ofile.write("%d\n" % pid)
        os.rename(tmpf, self.path)

    def remove(self):
        """
        Remove the marker. Return False if it was already absent.
        """
        try:
            os.unlink(self.path)
        except OSError:
            if os.path.exists(self.path):
                raise
            return False
        return True
