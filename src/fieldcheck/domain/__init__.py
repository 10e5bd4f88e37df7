"""Domain layer — rule kinds and the rule expression grammar.

This layer depends only on stdlib and ``fieldcheck.errors``.
It must never import from rules, condition, validation, or config.
"""
