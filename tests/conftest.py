from collections.abc import Iterator
from typing import Any

import pytest


@pytest.fixture(autouse=True)
def reset_config_and_registry() -> Iterator[list[Any]]:
    """Start each test with no bound settings and an empty settings registry.

    Yields the entries registered on import, for tests that need them back.
    """
    import databags.config.registry as registry
    import databags.config.validation as validation

    saved = list(registry._REGISTRY)  # pyright: ignore[reportPrivateUsage]
    registry._REGISTRY.clear()  # pyright: ignore[reportPrivateUsage]
    validation.reset_config()

    yield saved

    registry._REGISTRY[:] = saved  # pyright: ignore[reportPrivateUsage]
    validation.reset_config()
