"""
Tests for the migrate / seed entry points against a file store.
"""
import pytest

from gatehouse.migrate import run_migrate
from gatehouse.migrations import MIGRATIONS
from gatehouse.seed import SAMPLE_STAFF, SAMPLE_VISITORS, run_seed


class TestMigrate:

    @pytest.mark.asyncio
    async def test_first_run_applies_everything(self, tmp_path):
        result = await run_migrate(str(tmp_path / "gate.db"))
        assert result["applied"] == [m.name for m in MIGRATIONS]
        assert result["total"] == len(MIGRATIONS)
        assert result["latest"] == MIGRATIONS[-1].name

    @pytest.mark.asyncio
    async def test_second_run_applies_nothing(self, tmp_path):
        path = str(tmp_path / "gate.db")
        await run_migrate(path)
        result = await run_migrate(path)
        assert result["applied"] == []
        assert result["total"] == len(MIGRATIONS)


class TestSeed:

    @pytest.mark.asyncio
    async def test_seed_is_idempotent(self, tmp_path):
        path = str(tmp_path / "gate.db")

        first = await run_seed(path)
        assert first == {"staff_inserted": len(SAMPLE_STAFF), "visitors_inserted": len(SAMPLE_VISITORS)}

        second = await run_seed(path)
        assert second == {"staff_inserted": 0, "visitors_inserted": 0}
