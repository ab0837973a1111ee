"""
Vector and matrix helpers for the Banker's Algorithm State Evaluator.

Copies resource vectors / process-by-resource matrices into numpy arrays
and renders them as aligned text tables (R0 R1 ... columns, P0 P1 ... rows).
"""

import numpy as np
from typing import Sequence, Union

ArrayLike = Union[np.ndarray, Sequence[int], Sequence[Sequence[int]]]

# Column width used for every cell, header and row label
COLUMN_WIDTH = 4


def copy_vector(vector: ArrayLike) -> np.ndarray:
    """
    Copy a resource vector into a new 1-d integer array.

    Args:
        vector: Sequence of integers, one per resource type

    Returns:
        Independent numpy copy (modifying it never touches the source)

    Raises:
        ValueError: If the input is not one-dimensional
    """
    copied = np.array(vector, dtype=np.int64, copy=True)
    if copied.ndim != 1:
        raise ValueError(f"Expected a 1-d vector, got shape {copied.shape}")
    return copied


def copy_matrix(matrix: ArrayLike, num_columns: int = None) -> np.ndarray:
    """
    Copy a process-by-resource matrix into a new 2-d integer array.

    An empty input produces a (0, num_columns) matrix so that a state with
    no processes still knows how many resource types it has.

    Args:
        matrix: Sequence of rows
        num_columns: Expected row length (used for empty input)

    Returns:
        Independent numpy copy

    Raises:
        ValueError: If the input is not rectangular / two-dimensional
    """
    if len(matrix) == 0:
        return np.zeros((0, num_columns or 0), dtype=np.int64)
    try:
        copied = np.array(matrix, dtype=np.int64, copy=True)
    except ValueError as e:
        raise ValueError(f"Matrix rows are not all the same length: {e}")
    if copied.ndim != 2:
        raise ValueError(f"Expected a 2-d matrix, got shape {copied.shape}")
    return copied


def _header(num_resources: int) -> str:
    """Resource column header, e.g. '    R0  R1  R2  '."""
    cells = "".join(f"R{r:<{COLUMN_WIDTH - 1}}" for r in range(num_resources))
    return " " * COLUMN_WIDTH + cells


def vector_to_string(vector: ArrayLike) -> str:
    """
    Render a resource vector with an R0..Rm header.

    Args:
        vector: One value per resource type

    Returns:
        Two lines (header and values), each newline-terminated
    """
    values = copy_vector(vector)
    lines = [_header(len(values))]
    lines.append(" " * COLUMN_WIDTH + "".join(f"{v:<{COLUMN_WIDTH}}" for v in values))
    return "\n".join(lines) + "\n"


def matrix_to_string(matrix: ArrayLike, num_resources: int = None) -> str:
    """
    Render a process-by-resource matrix with R0..Rm header and P0..Pn labels.

    Args:
        matrix: One row per process
        num_resources: Column count (needed when there are no rows)

    Returns:
        Header line plus one line per process, each newline-terminated
    """
    values = copy_matrix(matrix, num_resources)
    lines = [_header(values.shape[1])]
    for p, row in enumerate(values):
        label = f"P{p:<{COLUMN_WIDTH - 1}}"
        lines.append(label + "".join(f"{v:<{COLUMN_WIDTH}}" for v in row))
    return "\n".join(lines) + "\n"
