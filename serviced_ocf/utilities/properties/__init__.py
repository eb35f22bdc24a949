"""
Read the service configuration property store, a shell-style defaults
file of name=value lines:

    # SERVICED_FS_TYPE=btrfs
    SERVICED_FS_TYPE=devicemapper
    export SERVICED_DM_THINPOOLDEV="/dev/mapper/serviced-serviced--pool"

Commented and malformed lines are ignored, an "export " prefix and one
level of matching quotes are stripped, and the last assignment of a name
wins.
"""
import re

from serviced_ocf.utilities.files import read_lines

RE_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def parse_property(line):
    """
    Return the (name, value) tuple assigned by <line>, or None.
    """
    line = line.strip()
    if not line or line.startswith("#"):
        return
    if line.startswith("export "):
        line = line[7:].lstrip()
    if "=" not in line:
        return
    name, value = line.split("=", 1)
    name = name.strip()
    if not RE_NAME.match(name):
        return
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        value = value[1:-1]
    return name, value


def parse_properties(lines):
    data = {}
    for line in lines:
        prop = parse_property(line)
        if prop is None:
            continue
        data[prop[0]] = prop[1]
    return data


class Properties(object):
    """
    The property store backed by <path>, read fresh on each instanciation.
    A missing file is an empty store.
    """
    def __init__(self, path):
        self.path = path
        self.data = parse_properties(read_lines(path) or [])

    def get(self, name, default=None):
        """
        Return the <name> property value. An empty value is an absent value.
        """
        value = self.data.get(name)
        if value in (None, ""):
            return default
        return value

    def __contains__(self, name):
        return self.get(name) is not None
