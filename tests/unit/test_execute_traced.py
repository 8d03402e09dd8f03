"""Tests for execute_traced — traced execution with step snapshots."""

from __future__ import annotations

from cam import ir
from cam.machine import execute, execute_traced
from cam.trace_types import ExecutionTrace, TraceStep


def _identity_program(argument):
    return [ir.const(argument), ir.cur(3), ir.GRAB, ir.access(0), ir.RETURN, ir.APPLY, ir.RETURN]


class TestExecuteTracedBasic:
    def test_trace_length_matches_executed_steps(self):
        trace = execute_traced(_identity_program(5))
        assert len(trace.steps) == trace.stats.steps == 7

    def test_returns_execution_trace_type(self):
        trace = execute_traced([ir.const(1), ir.RETURN])
        assert isinstance(trace, ExecutionTrace)
        assert all(isinstance(s, TraceStep) for s in trace.steps)

    def test_result_matches_untraced_execution(self):
        program = _identity_program(11)
        result, _ = execute(program)
        assert execute_traced(program).result == result == 11

    def test_pcs_follow_control_flow(self):
        trace = execute_traced(_identity_program(5))
        assert [s.pc for s in trace.steps] == [0, 1, 5, 2, 3, 4, 6]

    def test_each_snapshot_is_independent(self):
        trace = execute_traced(_identity_program(5))
        assert trace.steps[0].state.stack == [5]
        assert len(trace.steps[1].state.stack) == 2
        assert trace.steps[-1].state.stack == []
        assert trace.steps[-1].state.halted

    def test_initial_state_is_before_first_step(self):
        trace = execute_traced([ir.const(1), ir.RETURN], bindings=[9])
        assert trace.initial_state.pc == 0
        assert trace.initial_state.stack == []
        assert trace.initial_state.env == (9,)

    def test_dump_depth_visible_inside_call(self):
        trace = execute_traced(_identity_program(5))
        grab_step = trace.steps[3]
        assert grab_step.instruction == ir.GRAB
        assert len(grab_step.state.dump) == 1
        assert grab_step.state.env == (5,)

    def test_step_renders_instruction(self):
        trace = execute_traced([ir.const(1), ir.RETURN])
        assert "CONST 1" in str(trace.steps[0])


class TestTraceSerialization:
    def test_closure_on_stack_serializes_with_entry(self):
        step = execute_traced(_identity_program(5)).steps[1]
        data = step.to_dict()
        assert data["instruction"] == "CUR 3"
        assert data["state"]["stack"] == [5, {"closure": 2, "env": []}]

    def test_dump_frames_serialize(self):
        apply_step = execute_traced(_identity_program(5)).steps[2]
        assert apply_step.to_dict()["state"]["dump"] == [{"return_pc": 6, "env": []}]

    def test_final_state_carries_result(self):
        last = execute_traced(_identity_program(5)).steps[-1].to_dict()
        assert last["state"]["halted"] is True
        assert last["state"]["result"] == 5
