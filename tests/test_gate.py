"""
Tests for the single-flight operation gate.
"""

import threading

import pytest

from content_assistant.workflow import OperationGate, OperationInProgress, OperationKind


class TestOperationGate:
    """Tests for acquisition and release."""
    
    def test_gate_starts_idle(self):
        gate = OperationGate()
        
        assert gate.running is None
        assert not gate.busy
    
    def test_hold_marks_running_kind(self):
        gate = OperationGate()
        
        with gate.hold(OperationKind.GENERATE_IDEAS):
            assert gate.running == OperationKind.GENERATE_IDEAS
            assert gate.busy
        
        assert gate.running is None
    
    def test_second_acquisition_is_rejected(self):
        gate = OperationGate()
        
        with gate.hold(OperationKind.PUBLISH_DRAFT):
            with pytest.raises(OperationInProgress) as exc_info:
                with gate.hold(OperationKind.PUBLISH_DRAFT):
                    pass
        
        assert "already in progress" in str(exc_info.value)
        assert exc_info.value.running == OperationKind.PUBLISH_DRAFT
    
    def test_other_kind_is_also_rejected(self):
        gate = OperationGate()
        
        with gate.hold(OperationKind.APPROVE_IDEA):
            with pytest.raises(OperationInProgress, match="Cannot start publish_external"):
                with gate.hold(OperationKind.PUBLISH_EXTERNAL):
                    pass
    
    def test_gate_is_released_when_block_raises(self):
        gate = OperationGate()
        
        with pytest.raises(RuntimeError):
            with gate.hold(OperationKind.APPROVE_IDEA):
                raise RuntimeError("boom")
        
        assert not gate.busy
        with gate.hold(OperationKind.APPROVE_IDEA):
            pass
    
    def test_rejected_acquisition_does_not_release_holder(self):
        gate = OperationGate()
        
        with gate.hold(OperationKind.GENERATE_IDEAS):
            with pytest.raises(OperationInProgress):
                with gate.hold(OperationKind.GENERATE_IDEAS):
                    pass
            assert gate.running == OperationKind.GENERATE_IDEAS
    
    def test_only_one_thread_enters(self):
        gate = OperationGate()
        entered = threading.Event()
        release = threading.Event()
        rejected = []
        
        def holder():
            with gate.hold(OperationKind.PUBLISH_DRAFT):
                entered.set()
                release.wait(timeout=5)
        
        def contender():
            try:
                with gate.hold(OperationKind.PUBLISH_DRAFT):
                    pass
            except OperationInProgress:
                rejected.append(True)
        
        t = threading.Thread(target=holder)
        t.start()
        entered.wait(timeout=5)
        
        contenders = [threading.Thread(target=contender) for _ in range(5)]
        for c in contenders:
            c.start()
        for c in contenders:
            c.join(timeout=5)
        
        release.set()
        t.join(timeout=5)
        
        assert len(rejected) == 5
        assert not gate.busy
