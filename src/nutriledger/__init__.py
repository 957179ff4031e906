"""Nutrition accounting engine."""
