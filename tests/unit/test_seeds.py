"""
Unit tests for the database.seeds entry points.
"""

import runpy
from unittest.mock import AsyncMock, patch

import pytest

import database.seeds


class TestSeedAll:

    def test_module_entry_point_runs_seed_all(self):
        with patch("database.seeds.seed_all", new=AsyncMock()) as mock_seed_all:
            runpy.run_module("database.seeds", run_name="__main__")

        mock_seed_all.assert_awaited_once_with()

    @pytest.mark.asyncio
    async def test_sequences_before_reference_data(self):
        order = []
        with patch("database.seeds.seed_sequences", new=AsyncMock(side_effect=lambda f: order.append("sequences"))), \
             patch("database.seeds.seed_reference_data", new=AsyncMock(side_effect=lambda f: order.append("reference"))):
            await database.seeds.seed_all("factory")

        assert order == ["sequences", "reference"]
