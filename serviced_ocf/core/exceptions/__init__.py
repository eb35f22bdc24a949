class RaException(Exception):
    pass

class Error(RaException):
    """ Failed action
    """
    def __init__(self, value=""):
        self.value = value
    def __str__(self):
        return str(self.value)

class NotInstalled(Error):
    """ A binary, a tool or a configuration file required by the agent is
        missing on this node.
    """

class MissingBinary(NotInstalled):
    pass

class MissingConfig(NotInstalled):
    pass

class NotConfigured(Error):
    """ A resource parameter has an invalid value
    """

class TimeOut(Error):
    """ A bounded retry exhausted its deadline
    """

class AbortAction(Error):
    """ Abort a multi-step action. Later steps must not run.
    """

