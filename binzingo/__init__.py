"""Binzingo Cardy - turn-based card game engine."""
