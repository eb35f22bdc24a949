"""
The standardized return codes and action names of the OCF resource agent
API, as consumed by the cluster manager.
"""
import serviced_ocf.core.status as core_status

SUCCESS = 0
ERR_GENERIC = 1
ERR_ARGS = 2
ERR_UNIMPLEMENTED = 3
ERR_PERM = 4
ERR_INSTALLED = 5
ERR_CONFIGURED = 6
NOT_RUNNING = 7

RETCODE_STR = {
    SUCCESS: "OCF_SUCCESS",
    ERR_GENERIC: "OCF_ERR_GENERIC",
    ERR_ARGS: "OCF_ERR_ARGS",
    ERR_UNIMPLEMENTED: "OCF_ERR_UNIMPLEMENTED",
    ERR_PERM: "OCF_ERR_PERM",
    ERR_INSTALLED: "OCF_ERR_INSTALLED",
    ERR_CONFIGURED: "OCF_ERR_CONFIGURED",
    NOT_RUNNING: "OCF_NOT_RUNNING",
}

START = "start"
STOP = "stop"
STATUS = "status"
MONITOR = "monitor"
VALIDATE = "validate-all"
METADATA = "meta-data"
USAGE = "usage"
HELP = "help"

ACTIONS = (START, STOP, STATUS, MONITOR, VALIDATE, METADATA, USAGE, HELP)

# actions not gated by the validation
UNGATED_ACTIONS = (METADATA, USAGE, HELP)


def retcode_str(retcode):
    return RETCODE_STR.get(retcode, str(retcode))


def state_to_retcode(state):
    """
    Translate a resource state to the monitor/status return code.
    A degraded resource is a failed resource for the cluster manager.
    """
    if state == core_status.UP:
        return SUCCESS
    elif state == core_status.DOWN:
        return NOT_RUNNING
    return ERR_GENERIC
