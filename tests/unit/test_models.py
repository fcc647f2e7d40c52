"""Unit tests for check_consul.models parsing and status policy."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from check_consul.models import CheckRecord, CheckStatus, ServiceInstance, Verdict
from tests.fixtures.consul import SERVICE_HEALTH_PAYLOAD, make_check


class TestCheckStatus:
    @pytest.mark.parametrize("raw", ["passing", "warning", "critical"])
    def test_known_values_map_to_members(self, raw):
        assert CheckStatus.parse(raw).value == raw

    @pytest.mark.parametrize("raw", ["Passing", "PASSING", "maintenance", "", None, 1])
    def test_anything_else_is_unknown(self, raw):
        assert CheckStatus.parse(raw) is CheckStatus.UNKNOWN


class TestVerdict:
    def test_values_are_exit_codes(self):
        assert [int(v) for v in Verdict] == [0, 1, 2, 3]

    def test_labels_are_upper_case_level_words(self):
        assert [v.label for v in Verdict] == ["OK", "WARNING", "CRITICAL", "UNKNOWN"]


class TestCheckRecord:
    def test_parses_consul_field_names(self):
        check = CheckRecord.model_validate(SERVICE_HEALTH_PAYLOAD[1]["Checks"][1])
        assert check.id == "service:web-2"
        assert check.raw_status == "critical"
        assert check.status is CheckStatus.CRITICAL
        assert check.output == "connection refused"
        assert check.service_name == "web"
        assert check.passing is False

    def test_null_output_becomes_empty_string(self):
        check = CheckRecord.model_validate({"CheckID": "c", "Status": "passing", "Output": None})
        assert check.output == ""
        assert check.passing is True

    def test_non_string_status_is_unknown_not_an_error(self):
        check = CheckRecord.model_validate({"CheckID": "c", "Status": 1, "Output": 42})
        assert check.raw_status == "1"
        assert check.status is CheckStatus.UNKNOWN
        assert check.passing is False
        assert check.output == "42"

    def test_case_mismatch_is_not_passing(self):
        assert make_check("c", "Passing").passing is False

    def test_missing_check_id_is_rejected(self):
        with pytest.raises(ValidationError):
            CheckRecord.model_validate({"Status": "passing"})

    def test_is_immutable(self):
        check = make_check("c")
        with pytest.raises(ValidationError):
            check.raw_status = "critical"


class TestServiceInstance:
    def test_unwraps_service_entry(self):
        instance = ServiceInstance.model_validate(SERVICE_HEALTH_PAYLOAD[0])
        assert instance.service_name == "web"
        assert instance.node_name == "node-1"
        assert instance.tags == ("primary", "v2")
        assert [c.id for c in instance.checks] == ["serfHealth", "service:web-1"]
        assert instance.healthy is True

    def test_one_failing_check_makes_instance_unhealthy(self):
        instance = ServiceInstance.model_validate(SERVICE_HEALTH_PAYLOAD[1])
        assert instance.tags is None
        assert instance.healthy is False

    def test_no_checks_is_vacuously_healthy(self):
        instance = ServiceInstance(service_name="web", node_name="node-1")
        assert instance.checks == ()
        assert instance.healthy is True
