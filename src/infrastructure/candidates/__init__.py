"""
Candidate Feed Infrastructure Module

Exports:
    - DirectoryCandidateSource: undecided users from the user directory
"""

from .directory_candidate_source import DirectoryCandidateSource

__all__ = ["DirectoryCandidateSource"]
