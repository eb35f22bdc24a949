import logging
import logging.handlers
import os
import sys

from serviced_ocf.env import Env
from serviced_ocf.utilities.converters import convert_boolean
from serviced_ocf.utilities.files import makedirs

DEFAULT_HANDLERS = ["file", "stream", "syslog"]


class RaFormatter(logging.Formatter):
    """
    Add context information embedded in the record via "extra".
    """
    def __init__(self, *args, **kwargs):
        logging.Formatter.__init__(self, *args, **kwargs)
        self.sid = False
        self.attrs = [
            ("sid", "sid"),
            ("node", "n"),
            ("rid", "r"),
            ("action", "a"),
        ]

    def format(self, record):
        record.context = ""
        for xattr, key in self.attrs:
            if xattr == "sid" and not self.sid:
                continue
            val = getattr(record, xattr, None)
            if val in (None, ""):
                continue
            record.context += "%s:%s " % (key, val)
        record.context = record.context.rstrip()
        return logging.Formatter.format(self, record)


class RaFileHandler(logging.handlers.RotatingFileHandler):
    """
    Create the hosting directory and setup a RotatingFileHandler.
    """
    def __init__(self, logfile):
        logdir = os.path.dirname(logfile)
        makedirs(logdir)
        logging.handlers.RotatingFileHandler.__init__(self, logfile, maxBytes=1*5242880, backupCount=1)


def debug_requested(argv=None, environ=None):
    if argv is None:
        argv = sys.argv
    if environ is None:
        environ = os.environ
    if "--debug" in argv:
        return True
    try:
        return convert_boolean(environ.get("OCF_TRACE_RA", "0"))
    except ValueError:
        return False


def syslog_address():
    for path in ("/dev/log", "/var/run/syslog"):
        if os.path.exists(path):
            return os.path.realpath(path)
    return ("localhost", 514)


def init_logger(root=None, handlers=None, debug=None, environ=None):
    """
    Setup the <root> logger handlers, following the cluster manager
    logging conventions: HA_LOGFACILITY selects the syslog facility
    ("none" disables syslog), HA_LOGFILE or HA_DEBUGLOG enable a log file.
    """
    if root is None:
        root = Env.package
    if handlers is None:
        handlers = DEFAULT_HANDLERS
    if environ is None:
        environ = os.environ
    if debug is None:
        debug = debug_requested(environ=environ)
    level = logging.DEBUG if debug else logging.INFO

    log = logging.getLogger(root)
    if log.handlers:
        # already setup
        return log
    log.propagate = False

    logfile = environ.get("HA_DEBUGLOG") if debug else None
    logfile = logfile or environ.get("HA_LOGFILE")
    if "file" in handlers and logfile:
        try:
            fileformatter = RaFormatter("%(asctime)s %(levelname)s %(context)s | %(message)s")
            fileformatter.sid = True
            filehandler = RaFileHandler(logfile)
            filehandler.setFormatter(fileformatter)
            filehandler.setLevel(level)
            log.addHandler(filehandler)
        except (IOError, OSError):
            pass

    if "stream" in handlers:
        streamformatter = RaFormatter("%(levelname)s %(context)s %(message)s")
        streamhandler = logging.StreamHandler(sys.stderr)
        streamhandler.setFormatter(streamformatter)
        streamhandler.setLevel(level)
        log.addHandler(streamhandler)

    facility = environ.get("HA_LOGFACILITY", "daemon").lower()
    if facility != "none" and facility not in logging.handlers.SysLogHandler.facility_names:
        facility = "daemon"
    if "syslog" in handlers and facility != "none":
        tag = environ.get("HA_LOGTAG", root)
        syslogformatter = RaFormatter(tag + ": %(context)s %(message)s")
        try:
            sysloghandler = logging.handlers.SysLogHandler(address=syslog_address(), facility=facility)
        except (IOError, OSError):
            sysloghandler = None
        if sysloghandler:
            sysloghandler.setLevel(level)
            sysloghandler.setFormatter(syslogformatter)
            log.addHandler(sysloghandler)

    log.setLevel(logging.DEBUG)
    return log
