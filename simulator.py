#!/usr/bin/env python3
"""
Banker's Algorithm State Evaluator
Main entry point for evaluating system resource states.

Loads one or more state description files, displays the claim,
allocation and need matrices, and reports whether each state is safe.
"""

import argparse
import sys
from typing import List, Optional

from models.system_state import SystemState, StateLoadError, MAX_PROCESSES, MAX_RESOURCES
from utils.logger import SimulatorLogger
from algorithms.avoidance import simulate_completions

# Exit codes
EXIT_SAFE = 0
EXIT_UNSAFE = 1
EXIT_LOAD_ERROR = 2


def evaluate_state(
    state_path: str,
    system_state: SystemState,
    logger: SimulatorLogger,
    show_state: bool = True,
    show_sequence: bool = False
) -> Optional[bool]:
    """
    Load one state description and run the safety check on it.

    Args:
        state_path: Path to the state description file
        system_state: State instance to (re)load
        logger: Output logger
        show_state: Display the matrices and vectors
        show_sequence: Report the completion order / blocked processes

    Returns:
        True if safe, False if unsafe, None if the file could not be loaded
    """
    try:
        system_state.load(state_path)
    except StateLoadError as e:
        logger.log_load_error(state_path, e)
        return None

    logger.log_state_loaded(state_path, system_state.num_processes, system_state.num_resources)
    _warn_inconsistent(system_state, logger)

    if show_state:
        logger.log_system_state(system_state.display())

    sequence = simulate_completions(system_state)
    _log_trace(system_state, sequence, logger)

    safe = len(sequence) == system_state.num_processes
    if not show_sequence:
        logger.log_verdict(safe)
    elif safe:
        logger.log_verdict(safe, sequence)
    else:
        blocked = [p for p in range(system_state.num_processes) if p not in sequence]
        logger.log_verdict(safe, blocked)

    return safe


def _warn_inconsistent(system_state: SystemState, logger: SimulatorLogger) -> None:
    """Warn about negative need/available accepted outside strict mode."""
    for p, need in enumerate(system_state.need_matrix):
        if (need < 0).any():
            logger.log(f"P{p} allocation exceeds its claim (need {need.tolist()})", "warning")
    available = system_state.available_vector
    if (available < 0).any():
        logger.log(f"Resources over-allocated (available {available.tolist()})", "warning")


def _log_trace(system_state: SystemState, sequence: List[int], logger: SimulatorLogger) -> None:
    """Replay the completion order, logging availability after each release."""
    if not logger.verbose:
        return
    work = system_state.available_vector
    logger.log(f"Initial available: {work.tolist()}", "debug")
    for step, pid in enumerate(sequence, start=1):
        system_state.release_into(pid, work)
        logger.log_completion(step, pid, work.tolist())


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the evaluator."""
    parser = argparse.ArgumentParser(
        description="Banker's Algorithm State Evaluator"
    )
    parser.add_argument(
        'states',
        nargs='+',
        metavar='STATE_FILE',
        help='Path to a state description file'
    )
    parser.add_argument(
        '--max-processes',
        type=int,
        default=MAX_PROCESSES,
        help=f'Maximum number of processes accepted (default: {MAX_PROCESSES})'
    )
    parser.add_argument(
        '--max-resources',
        type=int,
        default=MAX_RESOURCES,
        help=f'Maximum number of resource types accepted (default: {MAX_RESOURCES})'
    )
    parser.add_argument(
        '--strict',
        action='store_true',
        help='Reject allocations exceeding claims or resource totals'
    )
    parser.add_argument(
        '--sequence',
        action='store_true',
        help='Show the safe sequence (or the blocked processes)'
    )
    parser.add_argument(
        '--quiet',
        action='store_true',
        help='Only report the verdict, not the matrices'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose logging'
    )
    parser.add_argument(
        '--log-file',
        type=str,
        default=None,
        help='Also write output to this file'
    )

    args = parser.parse_args(argv)

    # Validate arguments
    if args.max_processes < 0 or args.max_resources < 0:
        parser.error('--max-processes and --max-resources must be non-negative')

    logger = SimulatorLogger(verbose=args.verbose, log_file=args.log_file)
    system_state = SystemState(
        max_processes=args.max_processes,
        max_resources=args.max_resources,
        strict=args.strict
    )

    exit_code = EXIT_SAFE
    try:
        for state_path in args.states:
            if len(args.states) > 1:
                logger.log(f"{'='*60}\n{state_path}\n{'='*60}")
            safe = evaluate_state(
                state_path,
                system_state,
                logger,
                show_state=not args.quiet,
                show_sequence=args.sequence
            )
            if safe is None:
                exit_code = EXIT_LOAD_ERROR
            elif not safe:
                exit_code = max(exit_code, EXIT_UNSAFE)
    finally:
        logger.close()

    return exit_code


if __name__ == '__main__':
    sys.exit(main())
