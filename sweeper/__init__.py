"""Minesweeper rules engine with a Temporal-hosted game round."""
