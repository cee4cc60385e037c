"""Path matching tests for the auth skip list."""

import pytest

from src.api.core.constants import SKIP_AUTH_PATHS
from src.utils.path_helpers import path_matches


@pytest.mark.parametrize(
    "path",
    ["/health", "/health/", "/webhooks/polar", "/webhooks/paddle/", "/docs"],
)
def test_public_paths_match(path):
    assert path_matches(path, SKIP_AUTH_PATHS) is True


@pytest.mark.parametrize(
    "path",
    ["/v1/member", "/v1/member/init", "/v1/billing/reconcile", "/webhooks", "/"],
)
def test_protected_paths_do_not_match(path):
    assert path_matches(path, SKIP_AUTH_PATHS) is False
