import os
import socket
from uuid import uuid4


class Paths(object):
    def __init__(self):
        self.proc_mounts = "/proc/mounts"
        self.devnull = os.devnull


class SysPaths(object):
    """
    Location of the system tools the agents fork.
    """
    def __init__(self):
        self.umount = "/bin/umount"
        self.pgrep = "/usr/bin/pgrep"
        if not os.path.exists(self.pgrep) and os.path.exists("/bin/pgrep"):
            self.pgrep = "/bin/pgrep"


class Env(object):
    """Class to store globals
    """
    package = os.path.basename(os.path.dirname(__file__))
    session_uuid = os.environ.get("HA_SESSION_UUID") or str(uuid4())
    nodename = socket.gethostname().lower()

    # the cluster manager parameter passing convention
    reskey_prefix = "OCF_RESKEY_"
    meta_prefix = "OCF_RESKEY_CRM_meta_"

    default_action_timeout = 60
    paths = Paths()
    syspaths = SysPaths()
