import os
import stat

import pytest

from serviced_ocf.env import Env


class FakeTime(object):
    """
    A clock advanced by the sleeps only.
    """
    def __init__(self, now=1000.0):
        self.now = now
        self.sleeps = []

    def time(self):
        return self.now

    def sleep(self, delay):
        self.sleeps.append(delay)
        self.now += delay


@pytest.fixture(autouse=True)
def no_logger_setup(mocker):
    """
    Keep the agent logger propagating to the root logger, so caplog sees
    the records.
    """
    mocker.patch('serviced_ocf.core.agent.init_logger')


@pytest.fixture(scope='function')
def fake_time(mocker):
    fake = FakeTime()
    mocker.patch('serviced_ocf.utilities.wait.time', fake)
    mocker.patch('serviced_ocf.drivers.resource.app.time', fake)
    return fake


def make_executable(path):
    path.write_text(u"#!/bin/sh\nexit 0\n")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return str(path)


@pytest.fixture(scope='function')
def syspaths(tmp_path, mocker):
    bindir = tmp_path / "sbin"
    bindir.mkdir()
    mocker.patch.object(Env.syspaths, 'umount', make_executable(bindir / "umount"))
    mocker.patch.object(Env.syspaths, 'pgrep', make_executable(bindir / "pgrep"))
    return Env.syspaths


@pytest.fixture(scope='function')
def proc_mounts(tmp_path, mocker):
    """
    Return a function replacing the mount table content with <mounts>,
    a list of (dev, mnt, type) tuples.
    """
    path = tmp_path / "mounts"
    path.write_text(u"")
    mocker.patch.object(Env.paths, 'proc_mounts', str(path))

    def func(mounts):
        lines = ["%s %s %s rw,relatime 0 0" % m for m in mounts]
        path.write_text(u"\n".join(lines) + u"\n")

    return func


@pytest.fixture(scope='function')
def serviced_environ(tmp_path, syspaths):
    """
    The environment the cluster manager sets for a serviced resource
    instance, with every file relocated under tmp_path.
    """
    optdir = tmp_path / "opt"
    optdir.mkdir()
    config = tmp_path / "serviced"
    config.write_text(u"SERVICED_FS_TYPE=devicemapper\n"
                      u"SERVICED_DM_THINPOOLDEV=/dev/mapper/serviced-serviced--pool\n")
    return {
        "OCF_RESOURCE_INSTANCE": "serviced",
        "OCF_RESKEY_binary": make_executable(optdir / "serviced"),
        "OCF_RESKEY_storage_tool": make_executable(optdir / "serviced-storage"),
        "OCF_RESKEY_config": str(config),
        "OCF_RESKEY_pidfile": str(tmp_path / "run" / "serviced.pid"),
        "OCF_RESKEY_exports_table": str(tmp_path / "etab"),
    }


@pytest.fixture(scope='function')
def non_existing_file(tmp_path):
    assert os.path.exists(str(tmp_path))
    return os.path.join(str(tmp_path), 'foo')
