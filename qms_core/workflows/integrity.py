# qms_core/workflows/integrity.py
"""
Structural checks over a workflow rule table.

Pure logic, no Django settings access. Consumed by:
- TransitionValidator (injected tables)
- the qms_core system check
- the check_workflow_rules management command
"""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional

from .machines import StateMachine


def machine_problems(machine: StateMachine) -> List[str]:
    """
    Return human-readable problems for one machine. Empty list means healthy.
    """
    problems: List[str] = []
    mid = machine.machine_id
    declared = set(machine.states)

    if not machine.states:
        problems.append(f"{mid}: declares no states")

    if len(declared) != len(machine.states):
        problems.append(f"{mid}: duplicate state labels")

    for src, targets in machine.transitions.items():
        if src not in declared:
            problems.append(f"{mid}: transitions declared for unknown state {src}")
        for tgt in targets:
            if tgt not in declared:
                problems.append(f"{mid}: {src} -> {tgt} targets an undeclared state")
        if len(set(targets)) != len(targets):
            problems.append(f"{mid}: duplicate targets from {src}")

    for s in machine.states:
        if s not in machine.transitions:
            problems.append(f"{mid}: state {s} has no transition entry")

    if not machine.allows_rework:
        cycle = find_cycle(machine)
        if cycle:
            problems.append(
                f"{mid}: cycle {' -> '.join(cycle)} in a machine without rework loops"
            )

    return problems


def find_cycle(machine: StateMachine) -> Optional[List[str]]:
    """
    Return one cycle as a closed path (first == last), or None for a DAG.
    Self-loops count as cycles.
    """
    WHITE, GREY, BLACK = 0, 1, 2
    colour: Dict[str, int] = {s: WHITE for s in machine.transitions}
    stack: List[str] = []

    def visit(node: str) -> Optional[List[str]]:
        colour[node] = GREY
        stack.append(node)
        for nxt in machine.next_states(node):
            c = colour.get(nxt, WHITE)
            if c == GREY:
                return stack[stack.index(nxt):] + [nxt]
            if c == WHITE and nxt in machine.transitions:
                found = visit(nxt)
                if found:
                    return found
        stack.pop()
        colour[node] = BLACK
        return None

    for start in machine.transitions:
        if colour[start] == WHITE:
            found = visit(start)
            if found:
                return found
    return None


def check_rules(rules: Mapping[str, StateMachine]) -> List[str]:
    problems: List[str] = []

    if not rules:
        return ["rule table is empty"]

    for key, machine in rules.items():
        if key != machine.machine_id:
            problems.append(
                f"{key}: registered under a different id than {machine.machine_id}"
            )
        problems.extend(machine_problems(machine))

    return problems


__all__ = ["machine_problems", "find_cycle", "check_rules"]
