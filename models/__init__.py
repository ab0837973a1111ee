"""
Models package for the Banker's Algorithm State Evaluator.
Contains the system resource state (claim, allocation, need, available).
"""
