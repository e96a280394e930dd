"""prloadgen: bulk pull request generator for load-testing PR workflows."""

__version__ = "0.1.0"
