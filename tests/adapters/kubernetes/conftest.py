from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from tests.helpers.kubernetes import make_kubernetes_client

if TYPE_CHECKING:
    from collections.abc import Callable

    from homepage_discovery.adapters.kubernetes import KubernetesClient
    from tests.helpers.kubernetes import Handler


@pytest.fixture
def client_factory() -> Callable[[Handler], KubernetesClient]:
    return make_kubernetes_client
