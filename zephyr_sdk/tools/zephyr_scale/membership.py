"""
Adding test cases to an existing test run.

Data Center only offers a full-replace update of a run's items, so the current
items are read, diffed against the requested keys and resent together with the
new ones. Cloud accepts the requested membership directly and merges it
server side, so no read is needed.
"""
import logging
from abc import ABC, abstractmethod
from typing import Iterable, List, NamedTuple, Optional

from .client import ZephyrScaleClient
from .models import DeploymentVariant
from .payloads import NOT_EXECUTED, build_run_items

logger = logging.getLogger(__name__)


class MembershipUpdate(NamedTuple):
    added: int
    written: bool
    status_code: Optional[int] = None
    accepted: bool = True


def _unique(keys: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(keys))


class RunMembership(ABC):
    accepted_statuses = (200, 204)

    def __init__(self, client: ZephyrScaleClient):
        self.client = client

    @abstractmethod
    def add_test_cases(self, test_run_key: str, test_case_keys: List[str]) -> MembershipUpdate:
        """Make every key in ``test_case_keys`` a member of the run."""


class DataCenterRunMembership(RunMembership):
    accepted_statuses = (200, 201, 204)

    @staticmethod
    def new_keys(existing_items: List[dict], test_case_keys: Iterable[str]) -> List[str]:
        existing_keys = {item.get("testCaseKey") for item in existing_items}
        return [key for key in _unique(test_case_keys) if key not in existing_keys]

    def add_test_cases(self, test_run_key: str, test_case_keys: List[str]) -> MembershipUpdate:
        current = self.client.get_test_run(test_run_key).data or {}
        existing_items = current.get("items") or []
        new_keys = self.new_keys(existing_items, test_case_keys)
        if not new_keys:
            logger.info(f"Test run {test_run_key} already contains all {len(test_case_keys)} test cases")
            return MembershipUpdate(added=0, written=False)

        items = existing_items + build_run_items(new_keys, status=NOT_EXECUTED)
        logger.info(f"Resending {len(items)} items for test run {test_run_key} ({len(new_keys)} new)")
        response = self.client.update_test_run(test_run_key, {"items": items})
        return MembershipUpdate(
            added=len(new_keys),
            written=True,
            status_code=response.status_code,
            accepted=response.status_code in self.accepted_statuses,
        )


class CloudRunMembership(RunMembership):

    def add_test_cases(self, test_run_key: str, test_case_keys: List[str]) -> MembershipUpdate:
        keys = list(test_case_keys)
        logger.info(f"Sending {len(keys)} test case keys to test run {test_run_key}")
        response = self.client.update_test_run(test_run_key, {"items": keys})
        return MembershipUpdate(
            added=len(keys),
            written=True,
            status_code=response.status_code,
            accepted=response.status_code in self.accepted_statuses,
        )


MEMBERSHIP_STRATEGIES = {
    DeploymentVariant.CLOUD: CloudRunMembership,
    DeploymentVariant.DATACENTER: DataCenterRunMembership,
}


def membership_for(client: ZephyrScaleClient) -> RunMembership:
    return MEMBERSHIP_STRATEGIES[client.deployment](client)
