"""
Point-based value iteration for POMDPs.
"""

__version__ = "0.1.0"
