"""
State description loader for the Banker's Algorithm State Evaluator.

Reads the whitespace-delimited text format:

    n m
    r0 r1 ... r(m-1)            total resources
    c00 c01 ... c0(m-1)         claim matrix, n rows
    ...
    a00 a01 ... a0(m-1)         allocation matrix, n rows
    ...

Lines starting with '#' are comments and may appear anywhere; anything
after a '#' on a data line is ignored as well.
"""

import os
import re
import numpy as np
from dataclasses import dataclass
from typing import Iterator, List, Optional, TextIO, Tuple, Union

StateSource = Union[str, os.PathLike, TextIO]

_INTEGER = re.compile(r"^[+-]?\d+$")

# Storage is int64; every field and every derived value must fit
INT64_MIN = int(np.iinfo(np.int64).min)
INT64_MAX = int(np.iinfo(np.int64).max)


class StateLoadError(Exception):
    """Exception raised when a state description cannot be loaded or is invalid."""
    pass


@dataclass
class StateDescription:
    """
    Raw content of a parsed state description.

    Attributes:
        num_processes: Declared process count (n)
        num_resources: Declared resource type count (m)
        resource_total: [R] Total instances per resource type
        claim: [P][R] Maximum claim per process
        allocation: [P][R] Current allocation per process
        source_name: Where the description came from (for messages)
    """
    num_processes: int
    num_resources: int
    resource_total: List[int]
    claim: List[List[int]]
    allocation: List[List[int]]
    source_name: str = "<stream>"


class _TokenReader:
    """Sequential integer reader that skips comments and tracks line numbers."""

    def __init__(self, text: str, source_name: str):
        self.source_name = source_name
        self._tokens = self._tokenize(text)
        self.line_no = 0

    @staticmethod
    def _tokenize(text: str) -> Iterator[Tuple[int, str]]:
        for line_no, line in enumerate(text.splitlines(), start=1):
            content = line.split("#", 1)[0]
            for token in content.split():
                yield line_no, token

    def next_int(self, what: str) -> int:
        """
        Read the next integer field.

        Args:
            what: Field description for error messages, e.g. "claim[2][1]"

        Raises:
            StateLoadError: If input is exhausted or the token is not an integer
        """
        try:
            self.line_no, token = next(self._tokens)
        except StopIteration:
            raise StateLoadError(
                f"{self.source_name}: unexpected end of input while reading {what}"
            )
        if not _INTEGER.match(token):
            raise StateLoadError(
                f"{self.source_name}, line {self.line_no}: expected integer for "
                f"{what}, found '{token}'"
            )
        value = int(token)
        if not INT64_MIN <= value <= INT64_MAX:
            raise StateLoadError(
                f"{self.source_name}, line {self.line_no}: value {token} for "
                f"{what} does not fit in 64 bits"
            )
        return value

    def read_vector(self, length: int, name: str) -> List[int]:
        """Read `length` integers as one resource vector."""
        return [self.next_int(f"{name}[{r}]") for r in range(length)]

    def read_matrix(self, rows: int, columns: int, name: str) -> List[List[int]]:
        """Read a rows x columns matrix in row-major order."""
        return [
            [self.next_int(f"{name}[{p}][{r}]") for r in range(columns)]
            for p in range(rows)
        ]


def _read_text(source: StateSource) -> Tuple[str, str]:
    """
    Get the full text and a display name for a path or open text stream.

    Raises:
        StateLoadError: If the source cannot be opened or read
    """
    if isinstance(source, (str, os.PathLike)):
        source_name = os.fspath(source)
        try:
            with open(source_name, 'r', encoding='utf-8') as f:
                return f.read(), source_name
        except FileNotFoundError:
            raise StateLoadError(f"State file not found: {source_name}")
        except (OSError, UnicodeDecodeError) as e:
            raise StateLoadError(f"Could not read state file {source_name}: {e}")

    source_name = str(getattr(source, 'name', '<stream>'))
    try:
        return source.read(), source_name
    except (OSError, UnicodeDecodeError, ValueError) as e:
        raise StateLoadError(f"Could not read state from {source_name}: {e}")


def read_state_description(
    source: StateSource,
    max_processes: int,
    max_resources: int
) -> StateDescription:
    """
    Parse a state description from a file path or open text stream.

    Reading is strictly positional: counts, totals, claim matrix, then
    allocation matrix. Tokens after the allocation matrix are ignored.

    Args:
        source: Path to a state file, or a readable text stream
        max_processes: Largest process count accepted
        max_resources: Largest resource type count accepted

    Returns:
        StateDescription with every field filled in

    Raises:
        StateLoadError: If the source cannot be read, the counts are negative
            or exceed capacity, or a numeric field is missing or malformed
    """
    text, source_name = _read_text(source)
    reader = _TokenReader(text, source_name)

    num_processes = reader.next_int("process count")
    num_resources = reader.next_int("resource count")

    if num_processes < 0 or num_resources < 0:
        raise StateLoadError(
            f"{source_name}: counts must be non-negative "
            f"(numProcesses = {num_processes}, numResources = {num_resources})"
        )

    # Capacity is a validation rule only; storage is sized to the real counts
    if num_processes > max_processes or num_resources > max_resources:
        raise StateLoadError(
            f"{source_name}: maximum exceeded, requested "
            f"numProcesses = {num_processes} numResources = {num_resources}, "
            f"maximum = {max_processes}, {max_resources}"
        )

    resource_total = reader.read_vector(num_resources, "resourceTotal")
    claim = reader.read_matrix(num_processes, num_resources, "claim")
    allocation = reader.read_matrix(num_processes, num_resources, "allocation")

    return StateDescription(
        num_processes=num_processes,
        num_resources=num_resources,
        resource_total=resource_total,
        claim=claim,
        allocation=allocation,
        source_name=source_name
    )


def validate_allocations(
    resource_total: np.ndarray,
    claim: np.ndarray,
    allocation: np.ndarray,
    source_name: Optional[str] = None
) -> None:
    """
    Check the domain invariants that plain loading accepts silently.

    Critical validation:
    - every value is non-negative
    - allocation[p][r] <= claim[p][r]
    - sum(allocation[:, r]) <= total[r]

    Args:
        resource_total: [R] total instances
        claim: [P][R] maximum claims
        allocation: [P][R] current allocations
        source_name: Optional source name for error messages

    Raises:
        StateLoadError: On the first violated invariant
    """
    prefix = f"{source_name}: " if source_name else ""

    for name, values in (("resourceTotal", resource_total),
                         ("claim", claim),
                         ("allocation", allocation)):
        if values.size and values.min() < 0:
            raise StateLoadError(f"{prefix}{name} contains negative values")

    over_claim = np.argwhere(allocation > claim)
    if len(over_claim):
        p, r = over_claim[0]
        raise StateLoadError(
            f"{prefix}P{p}: allocation[{r}] ({allocation[p][r]}) "
            f"exceeds claim[{r}] ({claim[p][r]})"
        )

    total_allocated = allocation.sum(axis=0)
    for r in range(len(resource_total)):
        if total_allocated[r] > resource_total[r]:
            raise StateLoadError(
                f"{prefix}Resource R{r} allocations ({total_allocated[r]}) "
                f"exceed total instances ({resource_total[r]})"
            )
