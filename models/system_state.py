"""
System State model for the Banker's Algorithm State Evaluator.

Holds the claim, allocation and need matrices together with the total
and available resource vectors, and keeps the derived quantities
(need, available) consistent with the loaded ones.
"""

import numpy as np
from typing import Optional, Sequence
from dataclasses import dataclass, field

from utils.state_loader import (
    INT64_MAX,
    INT64_MIN,
    StateLoadError,
    StateSource,
    read_state_description,
    validate_allocations,
)
from utils.vectors import copy_matrix, copy_vector, matrix_to_string, vector_to_string

# Default capacity limits (validation rules only, storage is sized exactly)
MAX_PROCESSES = 20
MAX_RESOURCES = 20

__all__ = ["SystemState", "StateLoadError", "MAX_PROCESSES", "MAX_RESOURCES"]


def _empty_matrix() -> np.ndarray:
    return np.zeros((0, 0), dtype=np.int64)


def _empty_vector() -> np.ndarray:
    return np.zeros(0, dtype=np.int64)


def _check_derivation_range(total: np.ndarray, claim: np.ndarray,
                            allocation: np.ndarray) -> None:
    """
    Make sure need and available can be computed in int64 without wrapping.

    Raises:
        StateLoadError: If a derived value would overflow
    """
    # Python ints do not overflow
    need = [int(c) - int(a) for c, a in zip(claim.ravel(), allocation.ravel())]
    available = [
        int(total[r]) - sum(int(a) for a in allocation[:, r])
        for r in range(len(total))
    ]
    for name, values in (("need", need), ("available", available)):
        for value in values:
            if not INT64_MIN <= value <= INT64_MAX:
                raise StateLoadError(
                    f"Derived {name} value {value} does not fit in 64 bits"
                )


@dataclass(eq=False)
class SystemState:
    """
    Resource state of a computing system for Banker's Algorithm.

    A new instance is empty (zero processes, zero resource types). It is
    populated only through load() or load_matrices(), which reset first
    and derive need/available after filling the base quantities, so the
    object is always either empty or fully consistent.

    Attributes:
        max_processes: Largest process count accepted at load time
        max_resources: Largest resource type count accepted at load time
        strict: Reject negative values, allocation > claim and
            over-allocated resources instead of accepting them silently
        claim_matrix: [P][R] Maximum resource claim of each process
        allocation_matrix: [P][R] Resources currently held by each process
        need_matrix: [P][R] Computed as Claim - Allocation
        total_vector: [R] Total instances of each resource type
        available_vector: [R] Computed as Total - sum(Allocation)
    """
    max_processes: int = MAX_PROCESSES
    max_resources: int = MAX_RESOURCES
    strict: bool = False

    _num_processes: int = field(default=0, init=False, repr=False)
    _num_resources: int = field(default=0, init=False, repr=False)
    _claim_matrix: np.ndarray = field(default_factory=_empty_matrix, init=False, repr=False)
    _allocation_matrix: np.ndarray = field(default_factory=_empty_matrix, init=False, repr=False)
    _need_matrix: np.ndarray = field(default_factory=_empty_matrix, init=False, repr=False)
    _total_vector: np.ndarray = field(default_factory=_empty_vector, init=False, repr=False)
    _available_vector: np.ndarray = field(default_factory=_empty_vector, init=False, repr=False)

    @property
    def num_processes(self) -> int:
        """Number of processes in the system."""
        return self._num_processes

    @property
    def num_resources(self) -> int:
        """Number of resource types in the system."""
        return self._num_resources

    @property
    def claim_matrix(self) -> np.ndarray:
        """Get claim matrix [P][R] (copy)."""
        return self._claim_matrix.copy()

    @property
    def allocation_matrix(self) -> np.ndarray:
        """Get allocation matrix [P][R] (copy)."""
        return self._allocation_matrix.copy()

    @property
    def need_matrix(self) -> np.ndarray:
        """
        Get need matrix [P][R] (copy).
        Computed as: Need = Claim - Allocation
        """
        return self._need_matrix.copy()

    @property
    def total_vector(self) -> np.ndarray:
        """Get total resources vector [R] (copy)."""
        return self._total_vector.copy()

    @property
    def available_vector(self) -> np.ndarray:
        """Get available resources vector [R] (copy)."""
        return self._available_vector.copy()

    def reset(self) -> None:
        """Return to the empty state: no processes, no resource types."""
        self._num_processes = 0
        self._num_resources = 0
        self._claim_matrix = _empty_matrix()
        self._allocation_matrix = _empty_matrix()
        self._need_matrix = _empty_matrix()
        self._total_vector = _empty_vector()
        self._available_vector = _empty_vector()

    def load(self, source: StateSource) -> None:
        """
        Load the system state from a state description.

        Only claim, allocation and total resources are read; need and
        available are inferred afterwards. The state is reset before
        parsing, so a failed load leaves it empty rather than half-filled.

        Args:
            source: Path to a state file, or a readable text stream

        Raises:
            StateLoadError: If the source cannot be read, declares more
                processes/resources than allowed, or is malformed
        """
        self.reset()
        description = read_state_description(
            source, self.max_processes, self.max_resources
        )
        self._apply(
            description.resource_total,
            description.claim,
            description.allocation,
            description.source_name
        )

    def load_matrices(
        self,
        resource_total: Sequence[int],
        claim: Sequence[Sequence[int]],
        allocation: Sequence[Sequence[int]]
    ) -> None:
        """
        Load the system state from in-memory vectors and matrices.

        Same all-or-nothing semantics as load().

        Args:
            resource_total: [R] total instances per resource type
            claim: [P][R] maximum claims
            allocation: [P][R] current allocations

        Raises:
            StateLoadError: If shapes disagree or capacity is exceeded
        """
        self.reset()
        self._apply(resource_total, claim, allocation)

    def _apply(self, resource_total, claim, allocation,
               source_name: Optional[str] = None) -> None:
        """Validate shapes, store the base quantities and derive the rest."""
        try:
            total = copy_vector(resource_total)
            claim_matrix = copy_matrix(claim, len(total))
            allocation_matrix = copy_matrix(allocation, len(total))
        except (ValueError, OverflowError) as e:
            raise StateLoadError(f"Invalid state matrices: {e}")

        num_processes = claim_matrix.shape[0]
        expected = (num_processes, len(total))
        if claim_matrix.shape != expected or allocation_matrix.shape != expected:
            raise StateLoadError(
                f"Shape mismatch: total has {len(total)} resources, "
                f"claim is {claim_matrix.shape}, allocation is {allocation_matrix.shape}"
            )

        if num_processes > self.max_processes or len(total) > self.max_resources:
            raise StateLoadError(
                f"maximum exceeded, requested numProcesses = {num_processes} "
                f"numResources = {len(total)}, "
                f"maximum = {self.max_processes}, {self.max_resources}"
            )

        _check_derivation_range(total, claim_matrix, allocation_matrix)

        if self.strict:
            validate_allocations(total, claim_matrix, allocation_matrix, source_name)

        self._num_processes = num_processes
        self._num_resources = len(total)
        self._total_vector = total
        self._claim_matrix = claim_matrix
        self._allocation_matrix = allocation_matrix
        self.derive_need_and_available()

    def derive_need_and_available(self) -> None:
        """
        Infer need and available resources from the base quantities.

        need[p][r] = claim[p][r] - allocation[p][r]
        available[r] = total[r] - sum over p of allocation[p][r]
        """
        self._need_matrix = self._claim_matrix - self._allocation_matrix
        self._available_vector = self._total_vector - self._allocation_matrix.sum(axis=0)

    def _check_process(self, process: int) -> None:
        if not 0 <= process < self._num_processes:
            raise IndexError(
                f"Process index {process} out of range (0..{self._num_processes - 1})"
            )

    def need_of(self, process: int) -> np.ndarray:
        """
        Get the need vector of one process.

        Args:
            process: Process index

        Returns:
            Copy of need[process], length num_resources

        Raises:
            IndexError: If process is not a valid index
        """
        self._check_process(process)
        return self._need_matrix[process].copy()

    def release_into(self, process: int, available: np.ndarray) -> None:
        """
        Return a process's whole allocation into a working available vector.

        Simulates the process finishing. The vector is modified in place.

        Args:
            process: Process index
            available: [R] working vector owned by the caller (numpy array or list)

        Raises:
            IndexError: If process is not a valid index
            ValueError: If available does not have num_resources entries
        """
        self._check_process(process)
        if len(available) != self._num_resources:
            raise ValueError(
                f"Available vector has {len(available)} entries, "
                f"expected {self._num_resources}"
            )
        if isinstance(available, np.ndarray):
            available += self._allocation_matrix[process]
        else:
            for r, amount in enumerate(self._allocation_matrix[process]):
                available[r] += int(amount)

    def is_safe(self) -> bool:
        """Check whether this state is safe (Banker's safety algorithm)."""
        # Import here to avoid circular dependency
        from algorithms.avoidance import is_safe_state
        return is_safe_state(self)

    def display(self) -> str:
        """
        Generate readable string representation of system state.

        Returns:
            Claim, allocation and need matrices followed by the total
            and available resource vectors
        """
        m = self._num_resources
        output = [
            "Claim matrix C",
            matrix_to_string(self._claim_matrix, m),
            "Allocation matrix A",
            matrix_to_string(self._allocation_matrix, m),
            "Need matrix C-A",
            matrix_to_string(self._need_matrix, m),
            "Resource vector R",
            vector_to_string(self._total_vector),
            "Available vector V",
            vector_to_string(self._available_vector),
        ]
        return "\n".join(output) + "\n"

    def __str__(self) -> str:
        return self.display()

    def check_consistency(self, context: str = "") -> None:
        """Verify need and available still match claim, allocation and total.

        Args:
            context: Description of when this check is being run (for error messages)

        Raises:
            AssertionError: If a derived quantity has gone stale
        """
        expected_need = self._claim_matrix - self._allocation_matrix
        assert np.array_equal(self._need_matrix, expected_need), (
            f"Need matrix inconsistent {context}\n"
            f"  Stored:\n{self._need_matrix}\n"
            f"  Claim - Allocation:\n{expected_need}"
        )

        for r in range(self._num_resources):
            allocated = self._allocation_matrix[:, r].sum()
            available = self._available_vector[r]
            total = self._total_vector[r]

            # Conservation: allocated + available = total
            assert allocated + available == total, (
                f"Resource conservation violated for R{r} {context}\n"
                f"  Allocated: {allocated}, Available: {available}, Total: {total}\n"
                f"  Allocated + Available = {allocated + available} != {total}"
            )
