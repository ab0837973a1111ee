"""
Utilities package for the Banker's Algorithm State Evaluator.
Contains the state description loader, vector helpers and logger.
"""
