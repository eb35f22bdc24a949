import errno
import logging
import os
import shutil
import signal
import subprocess
import time

import pytest

from serviced_ocf.env import Env
from serviced_ocf.utilities.proc import (call, find_pid, is_exe, justcall, kill,
                                         pid_alive, send_signal, terminate, which)


@pytest.mark.ci
class TestWhich:
    @staticmethod
    def test_return_full_path_of_executable(tmp_path):
        exe = tmp_path / "tool"
        exe.write_text(u"#!/bin/sh\n")
        exe.chmod(0o755)
        assert which(str(exe)) == str(exe)
        assert is_exe(str(exe))

    @staticmethod
    def test_return_none_for_non_executable(tmp_path):
        exe = tmp_path / "tool"
        exe.write_text(u"data")
        exe.chmod(0o644)
        assert which(str(exe)) is None

    @staticmethod
    def test_return_none_for_missing(non_existing_file):
        assert which(non_existing_file) is None
        assert which(None) is None

    @staticmethod
    def test_search_the_path(tmp_path, mocker):
        exe = tmp_path / "tool"
        exe.write_text(u"#!/bin/sh\n")
        exe.chmod(0o755)
        mocker.patch.dict(os.environ, {"PATH": str(tmp_path)})
        assert which("tool") == str(exe)


@pytest.mark.ci
class TestJustcall:
    @staticmethod
    def test_return_out_err_ret():
        out, err, ret = justcall(["sh", "-c", "echo out; echo err >&2; exit 3"])
        assert out == "out\n"
        assert err == "err\n"
        assert ret == 3

    @staticmethod
    def test_missing_command_returns_1(non_existing_file):
        assert justcall([non_existing_file]) == ("", "", 1)


@pytest.mark.ci
class TestCall:
    @staticmethod
    def test_log_stdout_lines_with_vcall_style(caplog):
        with caplog.at_level(logging.INFO):
            ret, out, err = call(["sh", "-c", "echo line1; echo line2"], info=True, outlog=True,
                                 log=logging.getLogger("test"))
        assert (ret, out, err) == (0, "line1\nline2", "")
        assert "| line1" in caplog.text
        assert "| line2" in caplog.text

    @staticmethod
    def test_missing_command(non_existing_file, caplog):
        assert call([non_existing_file], log=logging.getLogger("test")) == (1, "", "")
        assert "command not found" in caplog.text

    @staticmethod
    def test_empty_argv():
        assert call([]) == (0, "", "")


@pytest.mark.ci
class TestPidAlive:
    @staticmethod
    def test_our_pid_is_alive():
        assert pid_alive(os.getpid())

    @staticmethod
    @pytest.mark.parametrize('pid', [None, 0, -1])
    def test_invalid_pids_are_dead(pid):
        assert not pid_alive(pid)

    @staticmethod
    def test_esrch_is_dead(mocker):
        mocker.patch('serviced_ocf.utilities.proc.os.waitpid', side_effect=ChildProcessError())
        mocker.patch('serviced_ocf.utilities.proc.os.kill', side_effect=OSError(errno.ESRCH, "no such process"))
        assert not pid_alive(12345)

    @staticmethod
    def test_eperm_is_alive(mocker):
        mocker.patch('serviced_ocf.utilities.proc.os.waitpid', side_effect=ChildProcessError())
        mocker.patch('serviced_ocf.utilities.proc.os.kill', side_effect=OSError(errno.EPERM, "not permitted"))
        assert pid_alive(1)

    @staticmethod
    def test_reaped_zombie_child_is_dead(mocker):
        mocker.patch('serviced_ocf.utilities.proc.os.waitpid', return_value=(12345, 0))
        os_kill = mocker.patch('serviced_ocf.utilities.proc.os.kill')
        assert not pid_alive(12345)
        assert os_kill.call_count == 0


@pytest.mark.ci
class TestSignals:
    @staticmethod
    def test_terminate_sends_sigterm(mocker):
        os_kill = mocker.patch('serviced_ocf.utilities.proc.os.kill')
        assert terminate(100)
        os_kill.assert_called_once_with(100, signal.SIGTERM)

    @staticmethod
    def test_kill_sends_sigkill(mocker):
        os_kill = mocker.patch('serviced_ocf.utilities.proc.os.kill')
        assert kill(100)
        os_kill.assert_called_once_with(100, signal.SIGKILL)

    @staticmethod
    def test_signal_to_a_gone_process(mocker):
        mocker.patch('serviced_ocf.utilities.proc.os.kill', side_effect=OSError(errno.ESRCH, "no such process"))
        assert send_signal(100, signal.SIGTERM) is False


@pytest.fixture(scope='function')
def sleeper(tmp_path):
    """
    Return a function starting a copy of the sleep binary, installed
    under a path holding regex metacharacters, with the <args> arguments.
    """
    bindir = tmp_path / "opt.v2+"
    bindir.mkdir()
    binary = str(bindir / "serviced")
    shutil.copy(which("sleep"), binary)
    procs = []

    def func(*args):
        proc = subprocess.Popen([binary] + list(args))
        procs.append(proc)
        return binary, proc

    yield func
    for proc in procs:
        proc.kill()
        proc.wait()


@pytest.mark.ci
class TestFindPid:
    @staticmethod
    def test_return_the_pgrep_pid(mocker):
        justcall = mocker.patch('serviced_ocf.utilities.proc.justcall', return_value=("555\n", "", 0))
        assert find_pid(["/opt/serviced/bin/serviced"]) == 555
        justcall.assert_called_once_with([Env.syspaths.pgrep, "-o", "-f", "^/opt/serviced/bin/serviced$"])

    @staticmethod
    def test_the_command_line_is_matched_literally(mocker):
        justcall = mocker.patch('serviced_ocf.utilities.proc.justcall', return_value=("", "", 1))
        find_pid(["/opt/serviced.v2+/bin/serviced", "--opt", "[x]"])
        assert justcall.call_args[0][0][-1] == r"^/opt/serviced\.v2\+/bin/serviced --opt \[x\]$"

    @staticmethod
    def test_return_none_when_no_match(mocker):
        mocker.patch('serviced_ocf.utilities.proc.justcall', return_value=("", "", 1))
        assert find_pid(["/opt/serviced/bin/serviced"]) is None

    @staticmethod
    @pytest.mark.skipif(not which(Env.syspaths.pgrep), reason="pgrep is not installed")
    def test_other_runs_of_the_executable_do_not_match(sleeper):
        binary, proc = sleeper("30")
        assert find_pid([binary]) is None

    @staticmethod
    @pytest.mark.skipif(not which(Env.syspaths.pgrep), reason="pgrep is not installed")
    def test_exact_command_line_match(sleeper):
        binary, proc = sleeper("30")
        deadline = time.time() + 5
        pid = find_pid([binary, "30"])
        while pid is None and time.time() < deadline:
            time.sleep(0.1)
            pid = find_pid([binary, "30"])
        assert pid == proc.pid
