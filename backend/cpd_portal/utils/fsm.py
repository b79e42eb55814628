"""Finite state machine helper for the vendor request lifecycle.

Usage:
    from cpd_portal.utils.fsm import TransitionValidator
    REQUEST_FSM = TransitionValidator({
        'pending': {'withdrawn', 'approved', 'rejected'},
        'withdrawn': set(),
    })
    REQUEST_FSM.assert_can_transition(current, 'withdrawn', action='withdraw')

A rejected transition aborts with 403: the caller is authenticated and owns the
row, the row is simply no longer in a state that allows the action.
"""
from __future__ import annotations
from typing import Dict, Optional, Set
from flask import abort


class TransitionValidator:
    def __init__(self, graph: Dict[str, Set[str]], field_name: str = 'status'):
        self.graph = graph
        self.field_name = field_name

    def can_transition(self, current: str, target: str) -> bool:
        return target in self.graph.get(current, set())

    def is_terminal(self, status: str) -> bool:
        return not self.graph.get(status)

    def assert_can_transition(self, current: str, target: str, action: Optional[str] = None):
        if not self.can_transition(current, target):
            if action:
                abort(403, description=f"Can only {action} {self.sources_for(target)} requests")
            abort(403, description=f"Invalid {self.field_name} transition {current} -> {target}")
        return True

    def sources_for(self, target: str) -> str:
        sources = sorted(s for s, targets in self.graph.items() if target in targets)
        return ' or '.join(sources)

__all__ = ['TransitionValidator']
