"""
The action dispatcher: map an action name to a driver operation, gate
every action but meta-data and usage behind the validation, and
translate the outcome to an OCF return code.

No exception escapes the action boundary.
"""
import os
import sys
import traceback
from xml.sax.saxutils import escape, quoteattr

import serviced_ocf.core.exceptions as ex
import serviced_ocf.core.ocf as ocf
import serviced_ocf.core.status as core_status
from serviced_ocf.core.keywords import build_instance, keywords
from serviced_ocf.core.logger import init_logger

ACTION_TIMEOUTS = (
    (ocf.START, 120, None),
    (ocf.STOP, 120, None),
    (ocf.STATUS, 20, None),
    (ocf.MONITOR, 30, 10),
    (ocf.VALIDATE, 20, None),
    (ocf.METADATA, 5, None),
)


class Agent(object):
    """
    A resource agent, driving the <driver> module resource class.
    """
    def __init__(self, driver, klass, environ=None, stdout=None):
        self.driver = driver
        self.klass = klass
        self.environ = os.environ if environ is None else environ
        self.stdout = stdout or sys.stdout
        self.log = init_logger()

    @property
    def name(self):
        return self.driver.AGENT_NAME

    def usage(self):
        return "usage: %s {%s}" % (self.name, "|".join(ocf.ACTIONS))

    def metadata(self):
        """
        Return the OCF resource agent meta-data xml document.
        """
        lines = [
            '<?xml version="1.0"?>',
            '<!DOCTYPE resource-agent SYSTEM "ra-api-1.dtd">',
            '<resource-agent name=%s version="1.0">' % quoteattr(self.name),
            '<version>1.0</version>',
            '<longdesc lang="en">%s</longdesc>' % escape(self.driver.AGENT_DESC),
            '<shortdesc lang="en">%s</shortdesc>' % escape(self.driver.AGENT_DESC),
            '<parameters>',
        ]
        for kw in keywords(self.driver.KEYWORDS):
            lines += [
                '<parameter name=%s unique="%d" required="%d">' % (quoteattr(kw.keyword), int(kw.unique), int(kw.required)),
                '<longdesc lang="en">%s</longdesc>' % escape(kw.text),
                '<shortdesc lang="en">%s</shortdesc>' % escape(kw.shortdesc),
            ]
            if kw.default is None:
                lines.append('<content type="%s"/>' % kw.content_type)
            else:
                lines.append('<content type="%s" default=%s/>' % (kw.content_type, quoteattr(str(kw.default))))
            lines.append('</parameter>')
        lines += ['</parameters>', '<actions>']
        for action, timeout, interval in ACTION_TIMEOUTS:
            if interval is None:
                lines.append('<action name="%s" timeout="%d"/>' % (action, timeout))
            else:
                lines.append('<action name="%s" timeout="%d" interval="%d"/>' % (action, timeout, interval))
        lines += ['</actions>', '</resource-agent>']
        return "\n".join(lines) + "\n"

    def __call__(self, argv=None):
        """
        Run the action named by <argv>[0]. Return the OCF return code.
        """
        argv = [arg for arg in (argv or []) if arg != "--debug"]
        if not argv:
            print(self.usage(), file=sys.stderr)
            return ocf.ERR_ARGS
        action = argv[0]
        try:
            return self.dispatch(action)
        except Exception:
            self.log.error("unexpected error during %s:\n%s", action, traceback.format_exc())
            return ocf.ERR_GENERIC

    def dispatch(self, action):
        if action in ocf.UNGATED_ACTIONS:
            return self.do_ungated_action(action)
        if action not in ocf.ACTIONS:
            self.log.error("%s: unimplemented action", action)
            print(self.usage(), file=sys.stderr)
            return ocf.ERR_UNIMPLEMENTED

        try:
            instance = build_instance(self.driver.KEYWORDS, self.environ)
        except ex.NotConfigured as exc:
            self.log.error("%s: %s", action, exc)
            return ocf.ERR_CONFIGURED
        resource = self.klass(instance, action=action)

        try:
            resource.validate()
        except ex.NotInstalled as exc:
            resource.log.error("%s", exc)
            return ocf.ERR_INSTALLED

        try:
            return self.do_action(resource, action)
        except ex.NotConfigured as exc:
            resource.log.error("%s", exc)
            return ocf.ERR_CONFIGURED
        except ex.Error as exc:
            resource.log.error("%s failed: %s", action, exc)
            return ocf.ERR_GENERIC

    def do_ungated_action(self, action):
        if action == ocf.METADATA:
            self.stdout.write(self.metadata())
        else:
            self.stdout.write(self.usage() + "\n")
        return ocf.SUCCESS

    @staticmethod
    def do_action(resource, action):
        if action == ocf.VALIDATE:
            return ocf.SUCCESS
        elif action == ocf.START:
            resource.start()
            return ocf.SUCCESS
        elif action == ocf.STOP:
            resource.stop()
            return ocf.SUCCESS
        elif action == ocf.STATUS:
            state = resource.status()
        else:
            state = resource.monitor()
        retcode = ocf.state_to_retcode(state)
        resource.log.debug("%s: %s (%s)", action, core_status.status_str(state), ocf.retcode_str(retcode))
        return retcode
