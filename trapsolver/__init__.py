"""
Circuit Trap Solver

Solves the trap-disarm grid puzzle against an interactive oracle, one move
at a time, learning across attempts.
"""

__version__ = "0.1.0"
