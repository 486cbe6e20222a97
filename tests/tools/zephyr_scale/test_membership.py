from unittest.mock import Mock

import pytest

from zephyr_sdk.tools.zephyr_scale.client import ApiResponse
from zephyr_sdk.tools.zephyr_scale.membership import (
    CloudRunMembership,
    DataCenterRunMembership,
    membership_for,
)
from zephyr_sdk.tools.zephyr_scale.models import DeploymentVariant


def _client(deployment, items=None, update_status=200):
    client = Mock()
    client.deployment = deployment
    client.get_test_run.return_value = ApiResponse(200, {"key": "PROJ-C1", "items": items or []})
    client.update_test_run.return_value = ApiResponse(update_status, None)
    return client


class TestDataCenterRunMembership:

    def test_only_missing_keys_are_added(self):
        existing = [
            {"testCaseKey": "A", "testResultStatus": "Pass"},
            {"testCaseKey": "B", "testResultStatus": "Fail"},
        ]
        client = _client(DeploymentVariant.DATACENTER, items=existing)

        update = DataCenterRunMembership(client).add_test_cases("PROJ-C1", ["B", "C"])

        assert update.added == 1
        assert update.written is True
        assert update.accepted is True
        client.update_test_run.assert_called_once_with("PROJ-C1", {"items": [
            {"testCaseKey": "A", "testResultStatus": "Pass"},
            {"testCaseKey": "B", "testResultStatus": "Fail"},
            {"testCaseKey": "C", "testResultStatus": "Not Executed"},
        ]})

    def test_subset_makes_no_write(self):
        client = _client(DeploymentVariant.DATACENTER, items=[{"testCaseKey": "A"}, {"testCaseKey": "B"}])

        update = DataCenterRunMembership(client).add_test_cases("PROJ-C1", ["A"])

        assert update.added == 0
        assert update.written is False
        client.update_test_run.assert_not_called()

    def test_duplicate_requested_keys_are_added_once(self):
        client = _client(DeploymentVariant.DATACENTER)

        update = DataCenterRunMembership(client).add_test_cases("PROJ-C1", ["C", "C"])

        assert update.added == 1
        items = client.update_test_run.call_args[0][1]["items"]
        assert items == [{"testCaseKey": "C", "testResultStatus": "Not Executed"}]

    @pytest.mark.parametrize("status,accepted", [(200, True), (201, True), (204, True), (202, False)])
    def test_write_status_acceptance(self, status, accepted):
        client = _client(DeploymentVariant.DATACENTER, update_status=status)

        update = DataCenterRunMembership(client).add_test_cases("PROJ-C1", ["A"])

        assert update.status_code == status
        assert update.accepted is accepted


class TestCloudRunMembership:

    def test_keys_are_sent_without_reading_the_run(self):
        client = _client(DeploymentVariant.CLOUD)

        update = CloudRunMembership(client).add_test_cases("PROJ-R1", ["A", "B"])

        client.get_test_run.assert_not_called()
        client.update_test_run.assert_called_once_with("PROJ-R1", {"items": ["A", "B"]})
        assert update.written is True
        assert update.added == 2

    def test_201_is_not_accepted(self):
        client = _client(DeploymentVariant.CLOUD, update_status=201)

        update = CloudRunMembership(client).add_test_cases("PROJ-R1", ["A"])

        assert update.accepted is False


class TestMembershipFor:

    @pytest.mark.parametrize("deployment,strategy", [
        (DeploymentVariant.CLOUD, CloudRunMembership),
        (DeploymentVariant.DATACENTER, DataCenterRunMembership),
    ])
    def test_strategy_follows_deployment(self, deployment, strategy):
        assert isinstance(membership_for(_client(deployment)), strategy)
