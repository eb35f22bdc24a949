"""
The storage teardown shared by the serviced service stop and the
serviced storage resource start and stop.

The sequence releases, in this fixed order:

1. the exported volume mounts
2. the tenant volume mounts
3. the device mapper thin pool backed volume set
4. the stale export table entries

An earlier category left mounted makes a later category deactivation
fail with "device busy", so the order is never changed. Only a failure
to unmount an exported volume aborts the sequence. Remote clients would
stay attached otherwise.

The mount table, the thin pool and the export table are shared with the
nfs server and volume group resources. No lock is taken: the cluster
configuration must order this resource stop before the nfs server stop,
itself before the volume group stop.
"""
import re
from collections import namedtuple

import serviced_ocf.core.exceptions as ex
from serviced_ocf.env import Env
from serviced_ocf.utilities import exports
from serviced_ocf.utilities.mounts.linux import Mounts
from serviced_ocf.utilities.proc import vcall
from serviced_ocf.utilities.properties import Properties

DEVICEMAPPER = "devicemapper"
PROP_FS_TYPE = "SERVICED_FS_TYPE"
PROP_THINPOOL_DEV = "SERVICED_DM_THINPOOLDEV"
PROP_VOLUMES_PATH = "SERVICED_VOLUMES_PATH"

# tenant ids are alphanumeric strings
TENANT_ID_PATTERN = "[0-9A-Za-z]+"

KEYWORDS = [
    {
        "keyword": "config",
        "default": "/etc/default/serviced",
        "text": "The serviced configuration file. Its SERVICED_FS_TYPE, SERVICED_DM_THINPOOLDEV and SERVICED_VOLUMES_PATH properties select the storage to release on stop.",
    },
    {
        "keyword": "storage_tool",
        "default": "/opt/serviced/bin/serviced-storage",
        "text": "The serviced storage control tool, used to disable the device mapper thin pool backed volumes.",
    },
    {
        "keyword": "exports_path",
        "default": "/exports/serviced_volumes_v2",
        "text": "The directory under which the tenant volumes are bind mounted and exported to the nfs clients.",
    },
    {
        "keyword": "volumes_path",
        "default": "/opt/serviced/var/volumes",
        "text": "The tenant volumes root directory, used when the configuration file does not set SERVICED_VOLUMES_PATH.",
    },
    {
        "keyword": "exports_table",
        "default": "/var/lib/nfs/etab",
        "text": "The nfs export table to scrub of the exported volumes entries.",
    },
]

StorageConfig = namedtuple("StorageConfig", ["fs_type", "thinpool_dev", "volumes_path"])


def storage_config(instance):
    """
    Return the StorageConfig read fresh from the service property store.
    """
    props = Properties(instance.config)
    return StorageConfig(
        fs_type=props.get(PROP_FS_TYPE),
        thinpool_dev=props.get(PROP_THINPOOL_DEV),
        volumes_path=props.get(PROP_VOLUMES_PATH, instance.volumes_path),
    )


def tenant_regex(volumes_path):
    return re.compile("^%s/%s$" % (re.escape(volumes_path.rstrip("/")), TENANT_ID_PATTERN))


class Teardown(object):
    """
    The ordered, best-effort release of the serviced storage.
    """
    def __init__(self, instance, log):
        self.instance = instance
        self.log = log

    def __call__(self):
        self.log.info("storage teardown")
        config = storage_config(self.instance)
        self.umount_exported()
        self.umount_tenants(config)
        self.disable_thinpool(config)
        self.scrub_exports()

    def exported_mounts(self):
        return Mounts().under(self.instance.exports_path)

    def tenant_mounts(self, volumes_path=None):
        if volumes_path is None:
            volumes_path = storage_config(self.instance).volumes_path
        return Mounts().matching(tenant_regex(volumes_path))

    def umount(self, mnt):
        """
        Force umount <mnt>. Return True on success, or if <mnt> is no
        longer mounted.
        """
        cmd = [Env.syspaths.umount, "-f", mnt]
        ret, out, err = self.vcall(cmd, err_to_warn=True)
        if ret == 0:
            return True
        if "not mounted" in err or "no mount point specified" in err:
            self.log.info("%s is already umounted", mnt)
            return True
        return False

    def vcall(self, cmd, **kwargs):
        kwargs["log"] = self.log
        return vcall(cmd, **kwargs)

    def umount_exported(self):
        mounts = self.exported_mounts()
        if not mounts:
            self.log.info("no exported volume mounted under %s", self.instance.exports_path)
            return
        for mount in mounts:
            if not self.umount(mount.mnt):
                raise ex.AbortAction("failed to umount exported volume %s" % mount.mnt)

    def umount_tenants(self, config):
        try:
            mounts = self.tenant_mounts(config.volumes_path)
        except ex.Error as exc:
            self.log.warning("skip tenant volumes umount: %s", exc)
            return
        if not mounts:
            self.log.info("no tenant volume mounted under %s", config.volumes_path)
            return
        failed = []
        for mount in mounts:
            if not self.umount(mount.mnt):
                failed.append(mount.mnt)
        if failed:
            self.log.warning("failed to umount tenant volumes: %s. continue", ", ".join(failed))

    def disable_thinpool(self, config):
        if config.fs_type != DEVICEMAPPER:
            self.log.info("skip thin pool deactivation: %s is %s, not %s",
                          PROP_FS_TYPE, config.fs_type or "not set", DEVICEMAPPER)
            return
        if not config.thinpool_dev:
            self.log.info("skip thin pool deactivation: %s is not set", PROP_THINPOOL_DEV)
            return
        cmd = [
            self.instance.storage_tool,
            "-o", "dm.thinpooldev=%s" % config.thinpool_dev,
            "disable", config.volumes_path,
        ]
        ret, out, err = self.vcall(cmd, err_to_warn=True)
        if ret != 0:
            self.log.warning("failed to disable the thin pool %s volumes. continue", config.thinpool_dev)

    def scrub_exports(self):
        try:
            exports.scrub(self.instance.exports_table, self.instance.exports_path, log=self.log)
        except (IOError, OSError) as exc:
            self.log.warning("failed to scrub the export table %s: %s. continue",
                             self.instance.exports_table, exc)
