"""Shared fixtures: content identifiers, SQS client doubles, and a SQLite-backed deal database.

Provides:
- make_cid: factory for deterministic CIDv1 (raw, sha2-256) values
- sqs_response: factory for boto3 send_message responses
- sqs_client: MagicMock SQS client accepting every message
- deal_engine: aiosqlite AsyncEngine with the four stage views created as tables
- empty_engine: aiosqlite AsyncEngine with no deal tables
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from multiformats import CID, multihash
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from src.dealflow.views.schema import views_metadata


def _make_cid(seed: str) -> CID:
    return CID("base32", 1, "raw", multihash.digest(seed.encode("utf-8"), "sha2-256"))


def _send_message_response(status_code: int = 200) -> dict:
    return {
        "MessageId": "5fea7756-0ea4-451a-a703-a558b933e274",
        "MD5OfMessageBody": "fafb00f5732ab283681e124bf8747ed1",
        "ResponseMetadata": {"HTTPStatusCode": status_code, "RetryAttempts": 0},
    }


@pytest.fixture
def make_cid():
    """Factory for deterministic CIDv1 values from a seed string."""
    return _make_cid


@pytest.fixture
def sqs_response():
    """Factory for boto3 ``send_message`` responses with a given status code."""
    return _send_message_response


@pytest.fixture
def sqs_client() -> MagicMock:
    """SQS client double that accepts every message."""
    client = MagicMock()
    client.send_message.return_value = _send_message_response(200)
    return client


@pytest_asyncio.fixture
async def deal_engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """File-backed SQLite engine with empty deal stage tables."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'deals.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(views_metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def empty_engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """SQLite engine with no deal tables at all; every view query fails."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
    yield engine
    await engine.dispose()
