import os
import re

import serviced_ocf.core.exceptions as ex


class Mount(object):
    def __init__(self, dev, mnt, type, mnt_opt):
        self.dev = dev.rstrip("/")
        self.mnt = mnt.rstrip("/")
        if mnt == "/":
            self.mnt = mnt
        self.type = type
        self.mnt_opt = mnt_opt

    def __str__(self):
        return "Mount: dev[%s] mnt[%s] type[%s] options[%s]" % \
               (self.dev, self.mnt, self.type, self.mnt_opt)


class BaseMounts(object):
    """
    A snapshot of the mount table, taken at instanciation.
    """
    def __init__(self):
        self.mounts = self.parse_mounts()

    def __iter__(self):
        return iter(self.mounts)

    def __len__(self):
        return len(self.mounts)

    def parse_mounts(self):
        raise ex.Error("parse_mounts is not implemented")

    def under(self, prefix):
        """
        Return the mounts at or below the <prefix> directory, deepest first.
        """
        prefix = prefix.rstrip("/")
        match = [m for m in self.mounts
                 if m.mnt == prefix or m.mnt.startswith(prefix + "/")]
        return self.deepest_first(match)

    def matching(self, regex):
        """
        Return the mounts whose mount point fully matches <regex>,
        deepest first.
        """
        if not hasattr(regex, "match"):
            regex = re.compile(regex)
        match = [m for m in self.mounts if regex.match(m.mnt)]
        return self.deepest_first(match)

    @staticmethod
    def deepest_first(mounts):
        return sorted(mounts, key=lambda x: (x.mnt.count(os.sep), x.mnt), reverse=True)

    def __str__(self):
        output = "%s" % self.__class__.__name__
        for m in self.mounts:
            output += "\n  %s" % m.__str__()
        return output
