"""Progression rules: scoring, dice, board movement and pending rolls."""
