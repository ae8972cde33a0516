"""Circadian rhythm analysis of continuous body temperature recordings."""
