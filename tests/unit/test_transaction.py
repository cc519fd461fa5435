import pytest

from clipfx_studio.animation.transaction import CurveTransaction, ParameterSnapshotCommand
from clipfx_studio.host.memory import ScalarParameter
from clipfx_studio.timing import ZERO, Timecode


def animated_scale():
    scale = ScalarParameter("Scale", 1.0)
    scale.is_animated = True
    scale.set_value_at_time(ZERO, 0.5)
    scale.set_value_at_time(Timecode(500.0), 1.5)
    return scale


def test_snapshot_restores_animated_curve():
    scale = animated_scale()
    command = ParameterSnapshotCommand(scale)
    command.execute()

    scale.is_animated = False
    scale.set_value_at_time(ZERO, 3.0)
    command.undo()

    assert scale.is_animated
    assert [(kf.time, kf.value) for kf in scale.keyframes] == [
        (ZERO, 0.5),
        (Timecode(500.0), 1.5),
    ]
    assert command.get_description() == "Snapshot Scale"


def test_snapshot_restores_static_value():
    scale = ScalarParameter("Scale", 2.0)
    command = ParameterSnapshotCommand(scale)
    command.execute()

    scale.is_animated = True
    scale.set_value_at_time(ZERO, 0.1)
    command.undo()

    assert not scale.is_animated
    assert scale.value == 2.0


def test_transaction_rolls_back_and_reraises():
    scale = animated_scale()
    other = ScalarParameter("Opacity", 1.0)

    with pytest.raises(RuntimeError):
        with CurveTransaction(description="test") as txn:
            txn.track(scale)
            txn.track(scale)
            scale.set_value_at_time(Timecode(1000.0), 9.0)
            txn.track(other)
            other.set_value_at_time(ZERO, 0.0)
            assert len(txn.commands) == 2
            raise RuntimeError("boom")

    assert len(scale.keyframes) == 2
    assert other.value == 1.0


def test_commit_keeps_changes():
    scale = ScalarParameter("Scale", 1.0)
    with CurveTransaction() as txn:
        txn.track(scale)
        scale.set_value_at_time(ZERO, 4.0)

    assert scale.value == 4.0
    assert txn.commands == []


def test_disabled_transaction_restores_nothing():
    scale = ScalarParameter("Scale", 1.0)
    txn = CurveTransaction(enabled=False)
    txn.track(scale)
    scale.set_value_at_time(ZERO, 4.0)
    assert txn.rollback() == 0
    assert scale.value == 4.0
