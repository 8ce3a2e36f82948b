"""Tests for the paid-blocks ledger."""

from minapay.payout.reward_engine.utils.paid_blocks import record_paid_blocks, load_paid_blocks


class TestPaidBlocks:

    def test_appends_height_and_state_hash(self, tmp_path, make_block):
        path = tmp_path / "data" / ".paidblocks"

        written = record_paid_blocks([make_block(height=1), make_block(height=2)], path)
        record_paid_blocks([make_block(height=3)], path)

        assert written == 2
        assert path.read_text().splitlines() == ["1|3NK1", "2|3NK2", "3|3NK3"]
        assert load_paid_blocks(path) == {(1, "3NK1"), (2, "3NK2"), (3, "3NK3")}

    def test_missing_ledger_is_empty(self, tmp_path):
        assert load_paid_blocks(tmp_path / ".paidblocks") == set()
