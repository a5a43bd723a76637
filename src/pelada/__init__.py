"""Roster, team draft, cash box and fee tracking for a recreational soccer group."""

__version__ = "0.1.0"
