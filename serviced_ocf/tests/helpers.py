from unittest.mock import call, ANY  # noqa: F401

from serviced_ocf.core.keywords import build_instance


def assert_resource_has_mandatory_methods(resource):
    for method in ['start', 'stop', 'status', 'monitor', 'validate']:
        assert callable(getattr(resource, method))


def create_instance(kwdicts, environ, **overrides):
    environ = dict(environ)
    for key, val in overrides.items():
        environ["OCF_RESKEY_" + key] = val
    return build_instance(kwdicts, environ)
