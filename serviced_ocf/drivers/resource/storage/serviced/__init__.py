"""
The module defining the storage.serviced resource class: the serviced
volumes mounts, thin pool and nfs exports, managed as a resource the
serviced service depends on.
"""
import serviced_ocf.core.status as core_status
from serviced_ocf.core.resource import Resource
from serviced_ocf.env import Env
from .. import KEYWORDS as STORAGE_KEYWORDS, Teardown, storage_config

DRIVER_GROUP = "storage"
DRIVER_BASENAME = "serviced"
AGENT_NAME = "serviced-storage"
AGENT_DESC = "Releases the serviced tenant volumes mounts, thin pool and nfs export entries"
KEYWORDS = STORAGE_KEYWORDS


class StorageServiced(Resource):
    """
    There is no process behind this resource. It is running as long as at
    least one exported or tenant volume is mounted.

    Start and stop both run the teardown: exports can be created by the
    static nfs configuration before the service bind mounts the volume,
    so stale entries are scrubbed before the service runs.
    """
    def __init__(self, instance, **kwargs):
        super(StorageServiced, self).__init__(instance, type="storage.serviced", **kwargs)

    def required_binaries(self):
        return [Env.syspaths.umount, self.instance.storage_tool]

    def required_files(self):
        return [self.instance.config]

    def teardown(self):
        Teardown(self.instance, self.log)()

    def start(self):
        self.teardown()

    def stop(self):
        self.teardown()

    def _status(self):
        teardown = Teardown(self.instance, self.log)
        config = storage_config(self.instance)
        exported = teardown.exported_mounts()
        tenants = teardown.tenant_mounts(config.volumes_path)
        log = self.log.info if self.is_probe() else self.log.debug
        log("%d exported and %d tenant volumes mounted", len(exported), len(tenants))
        if not exported and not tenants:
            return core_status.DOWN
        return core_status.UP
