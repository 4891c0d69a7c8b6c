"""
Tests for the funding transaction size estimation.
"""

from __future__ import annotations

from datatypes.transaction import (
    CHANGE_OUTPUT_SCRIPT,
    FUNDING_OUTPUT_SCRIPT,
    TxDescriptor,
    TxOutput,
    estimate_vsize,
)
from datatypes.utxo import OutputType
from tests.factories import make_utxo

P2TR = OutputType.TAPROOT_KEY_PATH
P2WPKH = OutputType.WITNESS_PUBKEY_HASH


class TestTxOutput:
    """Tests for the fixed outputs."""

    def test_output_scripts(self) -> None:
        assert len(FUNDING_OUTPUT_SCRIPT) == 34
        assert FUNDING_OUTPUT_SCRIPT[:2] == bytes([0x00, 0x20])
        assert len(CHANGE_OUTPUT_SCRIPT) == 34
        assert CHANGE_OUTPUT_SCRIPT[:2] == bytes([0x51, 0x20])

    def test_output_size(self) -> None:
        assert TxOutput(amount=1, script=FUNDING_OUTPUT_SCRIPT).size == 43
        assert TxOutput(amount=1, script=CHANGE_OUTPUT_SCRIPT).size == 43

    def test_output_amounts(self) -> None:
        tx = TxDescriptor.channel_funding([make_utxo(50_000)], amount=19_000, change=31_000)
        assert tx.funding.amount == 19_000
        assert tx.change.amount == 31_000
        assert tx.input_amount == 50_000


class TestWeight:
    """Tests for weight and virtual size."""

    def test_single_taproot_input(self) -> None:
        tx = TxDescriptor.channel_funding([make_utxo(1, P2TR)], amount=1)
        assert tx.base_size == 171
        assert tx.witness_size == 146
        assert tx.weight == 830
        # 207.5 rounds up
        assert tx.vsize == 208

    def test_single_p2wpkh_input(self) -> None:
        tx = TxDescriptor.channel_funding([make_utxo(1, P2WPKH)], amount=1)
        assert tx.weight == 835
        assert tx.vsize == 209

    def test_mixed_inputs(self) -> None:
        tx = TxDescriptor.channel_funding(
            [make_utxo(2, P2TR), make_utxo(1, P2WPKH)], amount=1
        )
        assert tx.weight == 1279
        assert tx.vsize == 320

    def test_two_p2wpkh_inputs(self) -> None:
        assert estimate_vsize([make_utxo(1, P2WPKH), make_utxo(1, P2WPKH)], amount=1) == 321

    def test_two_taproot_inputs(self) -> None:
        tx = TxDescriptor.channel_funding([make_utxo(1, P2TR), make_utxo(1, P2TR)], amount=1)
        assert tx.weight == 1274
        assert tx.vsize == 319

    def test_no_inputs_keeps_segwit_header(self) -> None:
        tx = TxDescriptor.channel_funding([], amount=0)
        assert tx.weight == 386
        assert tx.vsize == 97

    def test_each_input_adds_its_weight(self) -> None:
        base = TxDescriptor.channel_funding([make_utxo(1, P2TR)], amount=1).weight
        for output_type in OutputType:
            tx = TxDescriptor.channel_funding(
                [make_utxo(1, P2TR), make_utxo(1, output_type)], amount=1
            )
            metadata = output_type.value
            assert tx.weight - base == metadata.input_size * 4 + metadata.witness_size

    def test_input_count_var_int_grows(self) -> None:
        inputs = [make_utxo(1, P2TR, vout=vout) for vout in range(253)]
        tx = TxDescriptor.channel_funding(inputs, amount=1)
        assert tx.base_size == 4 + 4 + 3 + 1 + 75 * 253 + 86
        assert tx.weight == 112_726
        assert tx.vsize == 28_182

    def test_amounts_do_not_change_size(self) -> None:
        small = estimate_vsize([make_utxo(1, P2TR)], amount=1, change=0)
        large = estimate_vsize([make_utxo(2_100_000_000_000_000, P2TR)], amount=10**15, change=10**15)
        assert small == large

    def test_is_deterministic(self) -> None:
        inputs = [make_utxo(10, P2TR), make_utxo(5, P2WPKH)]
        assert TxDescriptor.channel_funding(inputs, amount=3) == TxDescriptor.channel_funding(
            inputs, amount=3
        )
