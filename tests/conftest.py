"""Pytest configuration and fixtures."""

import json
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
import structlog

from tokenswap.curve import (
    ConstantPriceCurve,
    ConstantProductCurve,
    CurveCalculator,
    OffsetCurve,
    StableCurve,
    SwapCurve,
)


@pytest.fixture(autouse=True)
def reset_structlog() -> Iterator[None]:
    """Undo any structlog.configure() a test (e.g. the CLI) performed."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def constant_product() -> ConstantProductCurve:
    return ConstantProductCurve()


@pytest.fixture
def constant_price() -> ConstantPriceCurve:
    """Constant price curve at 1 token A per token B."""
    return ConstantPriceCurve(token_b_price=1)


@pytest.fixture
def offset() -> OffsetCurve:
    """Offset curve with 1_000_000 phantom token B."""
    return OffsetCurve(token_b_offset=1_000_000)


@pytest.fixture
def stable() -> StableCurve:
    return StableCurve(amp=100)


@pytest.fixture(params=["constant_product", "constant_price", "offset", "stable"])
def any_curve(request: pytest.FixtureRequest) -> CurveCalculator:
    """Each curve variant in turn."""
    return request.getfixturevalue(request.param)


@pytest.fixture
def swap_curve(constant_product: ConstantProductCurve) -> SwapCurve:
    return SwapCurve(calculator=constant_product)


@pytest.fixture
def write_pool_config(tmp_path: Path) -> Callable[[dict[str, Any]], Path]:
    """Return a function that writes a pool configuration JSON file.

    Usage:
        path = write_pool_config({"curve": {"curveType": "constant_product"}})
    """

    def write(data: dict[str, Any], name: str = "pool.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data))
        return path

    return write
