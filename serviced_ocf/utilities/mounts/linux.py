import serviced_ocf.core.exceptions as ex
from serviced_ocf.env import Env
from serviced_ocf.utilities.files import read_lines
from serviced_ocf.utilities.string import unescape_octal
from .mounts import BaseMounts, Mount


def parse_mount_line(line):
    """
    Return a Mount from a /proc/mounts formatted line, or None if the
    line is malformed.
    """
    words = line.split()
    if len(words) < 4:
        return
    dev, mnt, fs_type, mnt_opt = words[:4]
    return Mount(unescape_octal(dev), unescape_octal(mnt), fs_type, mnt_opt)


class Mounts(BaseMounts):
    """
    The kernel mount table, never cached across instances.
    """
    def __init__(self, path=None):
        self.path = path or Env.paths.proc_mounts
        super(Mounts, self).__init__()

    def parse_mounts(self):
        lines = read_lines(self.path)
        if lines is None:
            raise ex.Error("unable to read the mount table %s" % self.path)
        mounts = []
        for line in lines:
            mount = parse_mount_line(line)
            if mount is None:
                continue
            mounts.append(mount)
        return mounts
