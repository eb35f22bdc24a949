"""
The module implementing the Keyword class, used to declare the resource
agents parameters and their properties, and the ResourceInstance built
from the parameters the cluster manager passes in the environment.
"""
from collections import namedtuple

import serviced_ocf.core.exceptions as ex
from serviced_ocf.env import Env
from serviced_ocf.utilities.converters import convert

INSTANCE_FIELDS = (
    "name",
    "binary",
    "config",
    "pidfile",
    "health_port",
    "poll_interval",
    "stop_margin",
    "kill_grace",
    "storage_tool",
    "exports_path",
    "volumes_path",
    "exports_table",
    "timeout",
    "interval",
)

ResourceInstance = namedtuple("ResourceInstance", INSTANCE_FIELDS)
ResourceInstance.__doc__ = """
One managed unit, as seen by the cluster manager. Built once per
invocation, never modified nor persisted. Fields not declared by the
agent keywords are None.
"""


class Keyword(object):
    def __init__(self, keyword,
                 required=False,
                 default=None,
                 convert=None,
                 unique=False,
                 text="",
                 shortdesc=None,
                 example=None):
        self.keyword = keyword
        self.required = required
        self.default = default
        self.convert = convert
        self.unique = unique
        self.text = text
        self.shortdesc = shortdesc or text.split(".")[0]
        if example is not None:
            self.example = example
        elif self.convert == "duration":
            self.example = "10s"
        elif self.convert == "integer":
            self.example = "1"
        else:
            self.example = "foo"

    def __repr__(self):
        return "<Keyword %s>" % self.keyword

    @property
    def envvar(self):
        return Env.reskey_prefix + self.keyword

    @property
    def content_type(self):
        if self.convert in ("integer", "duration"):
            return "integer"
        elif self.convert == "boolean":
            return "boolean"
        return "string"

    def value(self, environ):
        """
        Return the converted keyword value found in <environ>, or the
        converted default.
        """
        val = environ.get(self.envvar)
        if val in (None, ""):
            if self.required:
                raise ex.NotConfigured("%s is required" % self.keyword)
            val = self.default
        try:
            return convert(self.convert, val)
        except ValueError as exc:
            raise ex.NotConfigured("%s: %s" % (self.keyword, exc))


def keywords(dicts):
    """
    Return the list of Keyword built from a driver list of keyword dicts.
    """
    return [Keyword(**d) for d in dicts]


def meta_value(environ, key):
    """
    Return the <key> cluster manager meta attribute as an integer number
    of milliseconds, or None when unset.
    """
    val = environ.get(Env.meta_prefix + key)
    if val in (None, ""):
        return
    try:
        return convert("integer", val)
    except ValueError as exc:
        raise ex.NotConfigured("CRM_meta_%s: %s" % (key, exc))


def build_instance(kwdicts, environ, name=None):
    """
    Build the immutable ResourceInstance from the <environ> mapping, for
    an agent declaring <kwdicts>.
    """
    data = dict((field, None) for field in INSTANCE_FIELDS)
    for kw in keywords(kwdicts):
        if kw.keyword not in data:
            raise ex.Error("unknown keyword %s" % kw.keyword)
        data[kw.keyword] = kw.value(environ)
    data["name"] = name or environ.get("OCF_RESOURCE_INSTANCE") or Env.package
    data["timeout"] = meta_value(environ, "timeout")
    data["interval"] = meta_value(environ, "interval")
    return ResourceInstance(**data)
