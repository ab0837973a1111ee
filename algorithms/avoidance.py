"""
Deadlock Avoidance Algorithm (Banker's Algorithm) safety check.

Decides whether a SystemState is safe by simulating process completions:
a process whose remaining need fits the available resources is assumed
to run to completion and return everything it holds to the pool.
"""

import numpy as np
from typing import List, Optional, Sequence

from models.system_state import SystemState

# Returned by find_candidate_process when no process can make progress
NO_CANDIDATE = -1


def needs_are_met(
    system_state: SystemState,
    process: int,
    current_available: np.ndarray
) -> bool:
    """
    Check if a process's remaining need fits the available resources.

    Args:
        system_state: State being evaluated
        process: Process index
        current_available: [R] working available vector

    Returns:
        True if Need[process][r] <= current_available[r] for every r
    """
    return bool(np.all(system_state.need_of(process) <= current_available))


def find_candidate_process(
    system_state: SystemState,
    completed: np.ndarray,
    current_available: np.ndarray,
    scan_order: Optional[Sequence[int]] = None
) -> int:
    """
    Find the first uncompleted process whose needs can be met.

    Args:
        system_state: State being evaluated
        completed: [P] completion flags
        current_available: [R] working available vector
        scan_order: Order in which processes are examined
            (default: lowest index first)

    Returns:
        Process index, or NO_CANDIDATE if no process can complete
    """
    if scan_order is None:
        scan_order = range(system_state.num_processes)

    for process in scan_order:
        if not completed[process] and needs_are_met(system_state, process, current_available):
            return process
    return NO_CANDIDATE


def simulate_completions(
    system_state: SystemState,
    scan_order: Optional[Sequence[int]] = None
) -> List[int]:
    """
    Simulate processes finishing until no further progress is possible.

    Algorithm:
    1. Work = copy of Available, Finish = [False] * num_processes
    2. Find process i where Finish[i] == False and Need[i] <= Work
    3. If found: Work += Allocation[i], Finish[i] = True, go back to 2
       (scanning again from the start, since Work has grown)
    4. Otherwise stop

    Time Complexity: O(P²×R)

    Args:
        system_state: State being evaluated (never modified)
        scan_order: Order in which candidates are examined; a permutation
            of process indices, any iterable (default: lowest index first)

    Returns:
        Process indices in the order they completed
    """
    # Rescanned after every completion, so it must be re-iterable
    if scan_order is not None:
        scan_order = list(scan_order)

    work = system_state.available_vector
    finish = np.zeros(system_state.num_processes, dtype=bool)
    sequence = []

    while True:
        candidate = find_candidate_process(system_state, finish, work, scan_order)
        if candidate == NO_CANDIDATE:
            break
        system_state.release_into(candidate, work)
        finish[candidate] = True
        sequence.append(candidate)

    return sequence


def is_safe_state(
    system_state: SystemState,
    scan_order: Optional[Sequence[int]] = None
) -> bool:
    """
    Check if system is in a safe state using Banker's Algorithm.

    A state with no processes or no resource types is trivially safe.

    Args:
        system_state: State being evaluated
        scan_order: Optional candidate scan order (does not change the verdict)

    Returns:
        True if every process can complete in some order

    References:
        Silberschatz, A., Galvin, P. B., & Gagne, G. (2018).
        Operating System Concepts (10th ed.). Chapter 7.5: Deadlock Avoidance.
    """
    completed = simulate_completions(system_state, scan_order)
    return len(completed) == system_state.num_processes


def find_safe_sequence(system_state: SystemState) -> Optional[List[int]]:
    """
    Get a safe completion sequence, lowest index first.

    Returns:
        Process indices in completion order, or None if the state is unsafe
    """
    sequence = simulate_completions(system_state)
    if len(sequence) == system_state.num_processes:
        return sequence
    return None
