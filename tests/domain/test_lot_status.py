"""Tests for LotStatus storage/display conversion."""

import pytest

from seedtrace_kernel.domain.lot_status import LotStatus
from seedtrace_kernel.exceptions import InvalidLotStatusError


class TestLotStatus:
    def test_ui_value_is_lower_hyphenated(self):
        assert LotStatus.IN_STOCK.ui_value == "in-stock"
        assert LotStatus.CERTIFIED.ui_value == "certified"

    @pytest.mark.parametrize("raw", ["in-stock", "IN_STOCK", "in_stock", " In-Stock "])
    def test_from_ui_accepts_both_forms(self, raw):
        assert LotStatus.from_ui(raw) is LotStatus.IN_STOCK

    def test_from_ui_rejects_unknown(self):
        with pytest.raises(InvalidLotStatusError) as exc_info:
            LotStatus.from_ui("lost")
        assert exc_info.value.status == "lost"

    def test_every_status_round_trips_through_ui_value(self):
        for status in LotStatus:
            assert LotStatus.from_ui(status.ui_value) is status
