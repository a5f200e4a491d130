"""Scoring module: turns a finished quiz attempt into a score summary. Used through ``ScoringInterface``; it has no routes of its own."""
