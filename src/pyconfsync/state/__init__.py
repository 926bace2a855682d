"""Sync decision layer.

Pure freshness policy, the tagged refresh outcome, and the favorites
projector layered over the synchronized dataset.
"""
