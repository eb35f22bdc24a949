"""
The module defining the App resource class: a daemon forked by the
agent, tracked by a pid marker, stopped by signals.
"""
import os
import time

import serviced_ocf.core.exceptions as ex
import serviced_ocf.core.status as core_status
from serviced_ocf.core.resource import Resource
from serviced_ocf.utilities.lazy import lazy
from serviced_ocf.utilities.pidfile import PidMarker
from serviced_ocf.utilities.proc import find_pid, kill, pid_alive, spawn, terminate
from serviced_ocf.utilities.properties import Properties

# health check results
HEALTHY = 0
INITIALIZING = 2
UNHEALTHY = 1

HEALTH_STR = {
    HEALTHY: "healthy",
    INITIALIZING: "initializing",
    UNHEALTHY: "unhealthy",
}

KEYWORDS = [
    {
        "keyword": "binary",
        "text": "The daemon executable full path.",
    },
    {
        "keyword": "config",
        "text": "The daemon configuration file. Its name=value properties are set in the daemon environment.",
    },
    {
        "keyword": "pidfile",
        "text": "The file recording the pid of the daemon started by the agent.",
    },
    {
        "keyword": "poll_interval",
        "default": "1",
        "convert": "duration",
        "text": "The delay between two status or health checks while waiting for the daemon to start or stop.",
    },
    {
        "keyword": "stop_margin",
        "default": "7",
        "convert": "duration",
        "text": "The duration substracted from the cluster manager action timeout to compute the graceful stop deadline, leaving time to kill the daemon and release the storage.",
    },
    {
        "keyword": "kill_grace",
        "default": "2",
        "convert": "duration",
        "text": "The delay between the SIGKILL and the last status check.",
    },
]


def health_str(code):
    return HEALTH_STR.get(code, "unhealthy (%s)" % code)


class App(Resource):
    """
    The App resource driver class.
    """
    def __init__(self, instance, type="app", **kwargs):
        super(App, self).__init__(instance, type=type, **kwargs)
        self.label = os.path.basename(instance.binary or type)
        self.pid = None

    @lazy
    def pidmarker(self):
        return PidMarker(self.instance.pidfile)

    def required_binaries(self):
        return [self.instance.binary]

    def required_files(self):
        return [self.instance.config]

    #########################################################################
    # status
    #########################################################################
    def _status(self):
        """
        The marker is a hint only: a live recorded pid is running, else
        the process table is searched for the daemon command line. Other
        runs of the same executable, like client commands, are ignored.
        """
        pid = self.pidmarker.read()
        if pid is not None:
            if pid_alive(pid):
                self.pid = pid
                return core_status.UP
            self.log.info("pid %d recorded in %s is not running", pid, self.pidmarker)
        pid = find_pid(self.start_cmd())
        if pid is None:
            self.pid = None
            return core_status.DOWN
        self.log.info("adopt %s pid %d found in the process table", self.label, pid)
        self.pidmarker.write(pid)
        self.pid = pid
        return core_status.UP

    def is_up(self):
        return self.status() == core_status.UP

    def is_down(self):
        return self.status() == core_status.DOWN

    #########################################################################
    # health
    #########################################################################
    def health_check(self):
        """
        Return HEALTHY, INITIALIZING or any other code for unhealthy.
        Drivers of daemons with a health check operation override.
        """
        return HEALTHY

    def is_healthy(self):
        """
        The health polling predicate: True when healthy, False while
        initializing. Raise on any other result.
        """
        code = self.health_check()
        if code == HEALTHY:
            return True
        if code == INITIALIZING:
            self.log.info("%s is initializing", self.label)
            return False
        raise ex.Error("%s is %s" % (self.label, health_str(code)))

    def is_started(self):
        """
        The start polling predicate. A daemon exiting during its startup
        fails the start right away, without waiting for the deadline.
        """
        if self.status() == core_status.DOWN:
            raise ex.Error("%s exited during startup" % self.label)
        code = self.health_check()
        if code != HEALTHY:
            self.log.info("%s is %s", self.label, health_str(code))
            return False
        return True

    #########################################################################
    # actions
    #########################################################################
    def start_cmd(self):
        return [self.instance.binary]

    def start_env(self):
        """
        The daemon environment: the agent environment without the cluster
        manager variables, plus the configuration file properties.
        """
        env = dict((key, val) for key, val in os.environ.items()
                   if not key.startswith("OCF_") and not key.startswith("HA_"))
        env.update(Properties(self.instance.config).data)
        return env

    def start(self):
        if self.is_up():
            self.log.info("%s is already started, pid %d", self.label, self.pid)
            return
        self.pidmarker.remove()
        cmd = self.start_cmd()
        self.log.info("exec '%s'", " ".join(cmd))
        self.pid = spawn(cmd, env=self.start_env())
        self.pidmarker.write(self.pid)
        self.log.info("%s started, pid %d", self.label, self.pid)
        timeout = self.action_timeout()
        self.wait_for_fn(self.is_started, timeout, self.instance.poll_interval,
                         errmsg="%s not ready after %ds" % (self.label, timeout))
        self.log.info("%s is ready", self.label)

    def monitor(self):
        """
        Only a running daemon is health checked. Initializing is retried
        with no deadline of our own: the cluster manager monitor timeout
        bounds the loop.
        """
        state = self.status()
        if state != core_status.UP:
            return state
        try:
            self.wait_for_fn(self.is_healthy, None, self.instance.poll_interval)
        except ex.Error as exc:
            self.log.error("%s", exc)
            return core_status.DEGRADED
        return core_status.UP

    def post_stop(self):
        """
        Placeholder for the cleanup run after every stop, whatever the
        stop outcome.
        """
        pass

    def _post_stop(self):
        """
        Run post_stop. Return its error message, or None.
        """
        try:
            self.post_stop()
        except (ex.Error, IOError, OSError) as exc:
            return str(exc)

    def stop(self):
        if self.is_down():
            self.log.info("%s is already stopped", self.label)
            self.pidmarker.remove()
            error = self._post_stop()
            if error:
                raise ex.Error(error)
            return
        pid = self.pid
        timeout = self.action_timeout()
        self.log.info("send SIGTERM to %s pid %d, wait %ds", self.label, pid, timeout)
        terminate(pid)
        try:
            self.wait_for_fn(self.is_down, timeout, self.instance.poll_interval,
                             errmsg="%s pid %d still running after %ds" % (self.label, pid, timeout))
        except ex.TimeOut as exc:
            self.log.warning("%s. send SIGKILL", exc)
            kill(pid)
            time.sleep(self.instance.kill_grace)
        stopped = self.is_down()
        errors = []
        error = self._post_stop()
        if error:
            errors.append(error)
        if stopped:
            self.pidmarker.remove()
            self.log.info("%s is stopped", self.label)
        else:
            errors.insert(0, "%s pid %d still running after SIGKILL, keep %s" % (self.label, pid, self.pidmarker))
        if errors:
            raise ex.Error("; ".join(errors))
