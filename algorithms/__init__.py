"""
Algorithms package for the Banker's Algorithm State Evaluator.
Contains the Banker's safety check (deadlock avoidance).
"""
