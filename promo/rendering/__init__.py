"""Prompt rendering: presentation text and per-stage system instructions."""
