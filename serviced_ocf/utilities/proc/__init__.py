"""
Process control primitives: command execution with logging, executable
lookup, detached service spawning, signaling and liveness checks.
"""
import errno
import logging
import os
import signal
from errno import ENOENT, EACCES
from subprocess import Popen, PIPE

from serviced_ocf.env import Env
from serviced_ocf.utilities.string import bdecode, empty_string

close_fds = True


def which(program):
    if program is None:
        return

    fpath, fname = os.path.split(program)
    if fpath:
        if os.path.isfile(program) and is_exe(program, realpath=True):
            return program
    else:
        for path in os.environ.get("PATH", os.defpath).split(os.pathsep):
            exe_file = os.path.join(path, program)
            if is_exe(exe_file, realpath=True):
                return exe_file

    return


def is_exe(fpath, realpath=False):
    """Returns True if file path is executable, False otherwize
    """
    if realpath:
        fpath = os.path.realpath(fpath)
    if os.path.isdir(fpath) or not os.path.exists(fpath):
        return False
    return os.access(fpath, os.X_OK)


def justcall(argv):
    """
    Call subprocess' Popen(argv, stdout=PIPE, stderr=PIPE), stdin on the
    null device.
    Returns (stdout, stderr, returncode)
    """
    try:
        with open(Env.paths.devnull, "r") as devnull:
            proc = Popen(argv, stdin=devnull, stdout=PIPE, stderr=PIPE,
                         close_fds=close_fds)
            out, err = proc.communicate()
        return bdecode(out), bdecode(err), proc.returncode
    except OSError as exc:
        if exc.errno in (ENOENT, EACCES):
            return "", "", 1
        raise


def call(argv,
         log=None,         # callers should provide there own logger
                           # or we'll have to allocate a generic one

         info=False,       # False: log cmd as debug
                           # True:  log cmd as info

         outlog=False,     # False: discard stdout

         errlog=True,      # False: discard stderr
                           # True:  log stderr as err, warn or info
                           #        depending on err_to_warn and
                           #        err_to_info value
         err_to_warn=False,
         err_to_info=False,
         env=None):
    """
    Execute the command using Popen and return (ret, out, err)
    """
    if log is None:
        log = logging.getLogger("%s.call" % Env.package)

    if not argv:
        return (0, '', '')

    cmd = ' '.join(argv)
    if info:
        log.info(cmd)
    else:
        log.debug(cmd)

    try:
        process = Popen(argv, stdout=PIPE, stderr=PIPE, close_fds=close_fds, env=env)
    except OSError as exc:
        if exc.errno == EACCES:
            log.error("%s: command is not executable", argv[0])
            return 1, "", ""
        elif exc.errno == ENOENT:
            log.error("%s: command not found", argv[0])
            return 1, "", ""
        raise
    buff = process.communicate()
    out, err = tuple(map(lambda x: bdecode(x).strip(), buff))
    ret = process.returncode

    if not empty_string(err):
        if err_to_info:
            log.info('stderr:')
            call_log(err, log, "info")
        elif err_to_warn:
            log.warning('stderr:')
            call_log(err, log, "warning")
        elif errlog:
            if ret != 0:
                call_log(err, log, "error")
            else:
                log.warning('command successful but stderr:')
                call_log(err, log, "warning")
        else:
            log.debug('stderr:')
            call_log(err, log, "debug")
    if not empty_string(out):
        if outlog:
            if ret == 0:
                call_log(out, log, "info")
            elif err_to_info:
                log.info('command failed with stdout:')
                call_log(out, log, "info")
            elif err_to_warn:
                log.warning('command failed with stdout:')
                call_log(out, log, "warning")
            else:
                log.error('command failed with stdout:')
                call_log(out, log, "error")
        else:
            log.debug('output:')
            call_log(out, log, "debug")

    return (ret, out, err)


def vcall(args, **kwargs):
    kwargs["info"] = True
    kwargs["outlog"] = True
    return call(args, **kwargs)


def call_log(buff="", log=None, level="info"):
    if not buff:
        return
    lines = buff.rstrip().split("\n")
    try:
        fn = getattr(log, level)
    except Exception:
        return
    for line in lines:
        fn("| " + line)


def spawn(argv, env=None, cwd="/"):
    """
    Fork <argv> detached from the agent: its own session, stdio on the
    null device, no inherited file descriptors. The agent does not wait
    for the child.

    Return the child pid.
    """
    devnull = os.open(Env.paths.devnull, os.O_RDWR)
    try:
        proc = Popen(argv, stdin=devnull, stdout=devnull, stderr=devnull,
                     close_fds=close_fds, start_new_session=True,
                     cwd=cwd, env=env)
    finally:
        os.close(devnull)
    return proc.pid


def pid_alive(pid):
    """
    Return True if <pid> is in the process table.

    A zombie child of the agent still answers to signal 0, so reap it
    first when it is ours.
    """
    if pid is None or pid <= 0:
        return False
    try:
        wpid, _ = os.waitpid(pid, os.WNOHANG)
        if wpid == pid:
            return False
    except OSError:
        # not our child
        pass
    try:
        os.kill(pid, 0)
    except OSError as exc:
        if exc.errno == errno.ESRCH:
            return False
        if exc.errno == errno.EPERM:
            return True
        raise
    return True


def send_signal(pid, sig):
    """
    Send <sig> to <pid>. Return False if the process is already gone.
    """
    try:
        os.kill(pid, sig)
    except OSError as exc:
        if exc.errno == errno.ESRCH:
            return False
        raise
    return True


def terminate(pid):
    return send_signal(pid, signal.SIGTERM)


def kill(pid):
    return send_signal(pid, signal.SIGKILL)


ERE_SPECIAL = ".[]()*+?{}|^$\\"


def ere_escape(buff):
    """
    Escape <buff> for a literal match in a posix extended regex, as used
    by pgrep.
    """
    return "".join("\\" + c if c in ERE_SPECIAL else c for c in buff)


def find_pid(argv):
    """
    Return the oldest pid whose full command line is exactly <argv>, or
    None. A process running the same executable with other arguments
    does not match.
    """
    pattern = "^%s$" % ere_escape(" ".join(argv))
    out, _, ret = justcall([Env.syspaths.pgrep, "-o", "-f", pattern])
    if ret != 0:
        return
    for line in out.splitlines():
        line = line.strip()
        if line.isdigit():
            return int(line)
    return
