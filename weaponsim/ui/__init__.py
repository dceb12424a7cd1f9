"""
User interface module for the weapon simulator.
"""

from .report import build_weapon_table, render_report

__all__ = [
    "build_weapon_table",
    "render_report",
]
