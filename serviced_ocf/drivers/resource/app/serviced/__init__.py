"""
The module defining the app.serviced resource class: the serviced
daemon lifecycle, its health check, and the release of its storage on
stop.
"""
from serviced_ocf.env import Env
from serviced_ocf.utilities.proc import justcall
from .. import App, KEYWORDS as APP_KEYWORDS, health_str
from ...storage import DEVICEMAPPER, KEYWORDS as STORAGE_KEYWORDS, Teardown, storage_config

DRIVER_GROUP = "app"
DRIVER_BASENAME = "serviced"
AGENT_NAME = "serviced"
AGENT_DESC = "Manages the serviced daemon and releases its storage on stop"

DEFAULTS = {
    "binary": "/opt/serviced/bin/serviced",
    "config": "/etc/default/serviced",
    "pidfile": "/var/run/serviced.pid",
}

KEYWORDS = [dict(kw, default=DEFAULTS[kw["keyword"]]) if kw["keyword"] in DEFAULTS else kw
            for kw in APP_KEYWORDS] + [
    {
        "keyword": "health_port",
        "default": "4979",
        "convert": "integer",
        "text": "The serviced rpc port the health check connects to on the local host.",
    },
] + [kw for kw in STORAGE_KEYWORDS if kw["keyword"] != "config"]


class AppServiced(App):
    """
    The serviced daemon. A crashed or killed daemon leaves its volumes
    mounted and its thin pool active, so the storage teardown runs on
    every stop, the failed ones included.
    """
    def __init__(self, instance, **kwargs):
        super(AppServiced, self).__init__(instance, type="app.serviced", **kwargs)

    def required_binaries(self):
        binaries = [self.instance.binary, Env.syspaths.umount, Env.syspaths.pgrep]
        if storage_config(self.instance).fs_type == DEVICEMAPPER:
            binaries.append(self.instance.storage_tool)
        return binaries

    def health_check_cmd(self):
        return [
            self.instance.binary,
            "--endpoint", "localhost:%d" % self.instance.health_port,
            "healthcheck",
        ]

    def health_check(self):
        out, err, ret = justcall(self.health_check_cmd())
        self.log.debug("health check: %s", health_str(ret))
        if ret not in (0, 2):
            for line in (err or out).splitlines():
                self.log.info("| %s", line)
        return ret

    def post_stop(self):
        Teardown(self.instance, self.log)()
