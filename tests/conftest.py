from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

import pytest
import yaml

from protoweave.config import encode_parameter
from protoweave.descriptors import LinkedFile, link
from protoweave.types import MessageType, TypeSet
from tests._fixtures.descriptors import STRING, file_proto, message


@pytest.fixture
def orders_file() -> LinkedFile:
    """``orders_events.proto`` declaring ``com.acme.OrderPlaced``, linked on its own."""
    raw = file_proto(
        "orders_events.proto",
        "com.acme",
        messages=[message("OrderPlaced", ("order_id", STRING))],
    )
    return link([raw]).resolved.try_find("orders_events.proto")


@pytest.fixture
def order_placed(orders_file: LinkedFile) -> MessageType:
    found = TypeSet.from_file(orders_file).find("com.acme.OrderPlaced")
    assert isinstance(found, MessageType)
    return found


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[[dict], str]:
    """Write a YAML configuration and return the plugin parameter pointing at it."""

    def _write(data: dict) -> str:
        path = tmp_path / "protoweave.yml"
        path.write_text(yaml.safe_dump(data), encoding="utf-8")
        return encode_parameter(path)

    return _write


@pytest.fixture(autouse=True)
def _reset_protoweave_logger():
    """Undo ``configure_logging`` so caplog sees records of every test."""
    logger = logging.getLogger("protoweave")
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
