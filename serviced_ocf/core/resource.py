"""
Defines the resource class, which is the parent class of every
resource driver.
"""
import logging
import os

import serviced_ocf.core.exceptions as ex
import serviced_ocf.core.status as core_status
from serviced_ocf.env import Env
from serviced_ocf.utilities.lazy import lazy, set_lazy
from serviced_ocf.utilities.proc import call, vcall, which
from serviced_ocf.utilities.wait import wait_for


class Resource(object):
    """
    Resource drivers parent class
    """
    def __init__(self, instance, type=None, action=None):
        self.instance = instance
        self.rid = instance.name
        self.type = type
        self.action = action
        self.label = type

    @lazy
    def log(self):
        """
        Lazy init for the resource logger.
        """
        extra = {
            "node": Env.nodename,
            "sid": Env.session_uuid,
            "rid": self.rid,
            "action": self.action,
        }
        return logging.LoggerAdapter(logging.getLogger(self.log_label()), extra)

    def set_logger(self, log):
        """
        Set the <log> logger as the resource logger, in place of the default
        lazy-initialized one.
        """
        set_lazy(self, "log", log)

    def log_label(self):
        label = Env.package
        if self.type:
            label += "." + self.type
        return label

    def __str__(self):
        return "%s rid=%s type=%s" % (self.__class__.__name__, self.rid, self.type)

    def call(self, *args, **kwargs):
        """
        Wrap call, setting the resource logger
        """
        kwargs["log"] = self.log
        return call(*args, **kwargs)

    def vcall(self, *args, **kwargs):
        """
        Wrap vcall, setting the resource logger
        """
        kwargs["log"] = self.log
        return vcall(*args, **kwargs)

    def wait_for_fn(self, func, tmo, delay, errmsg="waited too long for startup"):
        """
        Execute the <func> test function until it returns True or <tmo>
        seconds elapse. A None <tmo> waits forever, leaving the cluster
        manager action timeout as the only bound.
        """
        self.log.debug("wait for %s (timeout %s, delay %s)", getattr(func, "__name__", func), tmo, delay)
        return wait_for(func, timeout=tmo, delay=delay, errmsg=errmsg)

    def action_timeout(self, default=None):
        """
        Return the seconds an action can spend polling: the cluster manager
        action timeout minus the stop_margin safety, or <default>.
        """
        if default is None:
            default = Env.default_action_timeout
        if self.instance.timeout is None:
            return default
        margin = self.instance.stop_margin or 0
        return max(self.instance.timeout // 1000 - margin, 1)

    def is_probe(self):
        return self.instance.interval == 0

    #########################################################################
    # validation
    #########################################################################
    def required_binaries(self):
        return []

    def required_files(self):
        return []

    def validate(self):
        """
        Verify the binaries and files the resource needs are installed.
        No side effect.
        """
        for binary in self.required_binaries():
            if not which(binary):
                raise ex.MissingBinary("%s is not installed or not executable" % binary)
        for path in self.required_files():
            if not os.path.isfile(path):
                raise ex.MissingConfig("%s does not exist" % path)

    #########################################################################
    # actions
    #########################################################################
    def start(self):
        pass

    def stop(self):
        pass

    def _status(self):
        return core_status.UNDEF

    def status(self):
        """
        Evaluate and return the resource state.
        """
        state = self._status()
        self.log.debug("status: %s", core_status.status_str(state))
        return state

    def monitor(self):
        return self.status()
