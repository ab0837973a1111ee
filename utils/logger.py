"""
Logger utility for the Banker's Algorithm State Evaluator.

Provides console (and optional file) logging with verbosity levels.
"""

from typing import List, Optional
from datetime import datetime


class SimulatorLogger:
    """
    Logger for state evaluation events and verdicts.

    Format: "Step X: P<n> completes - available now [..]"
    """

    def __init__(self, verbose: bool = False, log_file: Optional[str] = None):
        """
        Initialize logger.

        Args:
            verbose: Enable verbose (debug) output
            log_file: Optional file path for logging
        """
        self.verbose = verbose
        self.log_file = log_file
        self.file_handle = None

        if self.log_file:
            self.file_handle = open(self.log_file, 'w', encoding='utf-8')
            self._write_header()

    def _write_header(self) -> None:
        """Write log file header."""
        if self.file_handle:
            timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
            self.file_handle.write(f"State Evaluation Log - {timestamp}\n")
            self.file_handle.write("="*60 + "\n\n")

    def log(self, message: str, level: str = "info") -> None:
        """
        Log a message.

        Args:
            message: Message to log
            level: Log level (info, debug, warning, error)
        """
        if level == "debug" and not self.verbose:
            return

        formatted = self._format_message(message, level)

        # Console output
        print(formatted)

        # File output
        if self.file_handle:
            self.file_handle.write(formatted + "\n")
            self.file_handle.flush()

    def _format_message(self, message: str, level: str) -> str:
        """Format message with level prefix."""
        if level == "error":
            return f"[ERROR] {message}"
        elif level == "warning":
            return f"[WARNING] {message}"
        elif level == "debug":
            return f"[DEBUG] {message}"
        else:
            return message

    def log_state_loaded(self, source: str, num_processes: int, num_resources: int) -> None:
        """Log a successfully loaded state description."""
        self.log(
            f"Loaded {source}: {num_processes} processes, {num_resources} resource types",
            "debug"
        )

    def log_load_error(self, source: str, error: Exception) -> None:
        """Log a state description that could not be loaded."""
        self.log(f"Failed to load state {source}: {error}", "error")

    def log_completion(self, step: int, pid: int, available: List[int]) -> None:
        """
        Log one simulated process completion.

        Args:
            step: Completion number (1-based)
            pid: Process index that completed
            available: Working available vector after its release
        """
        self.log(f"Step {step}: P{pid} completes - available now {available}", "debug")

    def log_verdict(self, safe: bool, pids: Optional[List[int]] = None) -> None:
        """
        Log the safety verdict for a state.

        Args:
            safe: Safety check result
            pids: Completion order (safe) or blocked processes (unsafe)
        """
        self.log(f"State is {'SAFE' if safe else 'UNSAFE'}")
        if pids is None:
            return
        if safe:
            self.log("Safe sequence: " + " -> ".join(f"P{pid}" for pid in pids))
        else:
            blocked = ", ".join(f"P{pid}" for pid in pids)
            self.log(f"Blocked processes: [{blocked}]")

    def log_system_state(self, state_str: str) -> None:
        """
        Log system state rendering.

        Args:
            state_str: Formatted system state
        """
        self.log(state_str.rstrip("\n") + "\n")

    def close(self) -> None:
        """Close log file if open."""
        if self.file_handle:
            self.file_handle.close()
            self.file_handle = None

    def __del__(self):
        """Cleanup on destruction."""
        self.close()
