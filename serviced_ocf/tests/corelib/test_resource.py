import pytest

import serviced_ocf.core.exceptions as ex
import serviced_ocf.core.status as core_status
from serviced_ocf.core.resource import Resource
from serviced_ocf.drivers.resource.app.serviced import KEYWORDS
from serviced_ocf.tests.helpers import assert_resource_has_mandatory_methods, create_instance


def resource(environ=None, **overrides):
    return Resource(create_instance(KEYWORDS, environ or {}, **overrides))


@pytest.mark.ci
class TestResource:
    @staticmethod
    def test_has_mandatory_methods():
        assert_resource_has_mandatory_methods(resource())

    @staticmethod
    def test_base_status_is_undef():
        assert resource().status() == core_status.UNDEF

    @staticmethod
    def test_rid_is_the_instance_name():
        assert resource({"OCF_RESOURCE_INSTANCE": "cc-master"}).rid == "cc-master"

    @staticmethod
    def test_log_label():
        res = Resource(create_instance(KEYWORDS, {}), type="app.serviced")
        assert res.log_label() == "serviced_ocf.app.serviced"
        assert res.log.logger.name == "serviced_ocf.app.serviced"
        assert res.log.extra["rid"] == res.rid


@pytest.mark.ci
class TestActionTimeout:
    @staticmethod
    def test_default_when_the_cluster_manager_sets_no_timeout():
        assert resource().action_timeout() == 60
        assert resource().action_timeout(default=30) == 30

    @staticmethod
    def test_timeout_minus_the_stop_margin():
        res = resource({"OCF_RESKEY_CRM_meta_timeout": "20000"})
        assert res.action_timeout() == 13

    @staticmethod
    def test_custom_stop_margin():
        res = resource({"OCF_RESKEY_CRM_meta_timeout": "120000"}, stop_margin="20s")
        assert res.action_timeout() == 100

    @staticmethod
    def test_never_less_than_one_second():
        res = resource({"OCF_RESKEY_CRM_meta_timeout": "3000"})
        assert res.action_timeout() == 1


@pytest.mark.ci
class TestIsProbe:
    @staticmethod
    @pytest.mark.parametrize('environ, expected', [
        ({}, False),
        ({"OCF_RESKEY_CRM_meta_interval": "0"}, True),
        ({"OCF_RESKEY_CRM_meta_interval": "10000"}, False),
    ])
    def test_is_probe(environ, expected):
        assert resource(environ).is_probe() is expected


@pytest.mark.ci
class TestValidate:
    @staticmethod
    def test_no_requirement():
        resource().validate()

    @staticmethod
    def test_missing_binary(mocker, non_existing_file):
        mocker.patch.object(Resource, 'required_binaries', return_value=[non_existing_file])
        with pytest.raises(ex.MissingBinary):
            resource().validate()

    @staticmethod
    def test_missing_config(mocker, non_existing_file):
        mocker.patch.object(Resource, 'required_files', return_value=[non_existing_file])
        with pytest.raises(ex.MissingConfig):
            resource().validate()

    @staticmethod
    def test_missing_binary_and_config_are_not_installed_errors():
        assert issubclass(ex.MissingBinary, ex.NotInstalled)
        assert issubclass(ex.MissingConfig, ex.NotInstalled)
