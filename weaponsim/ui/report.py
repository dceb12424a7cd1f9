"""
Report module for the weapon simulator.

Renders the statistics gathered by a Stats aggregator as rich tables.
"""

from rich.markup import escape
from rich.table import Table

from weaponsim.combat.stats import Stats, WeaponReport
from weaponsim.core.constants import TOTAL_DAMAGE
from weaponsim.core.utils import cprint, crule, format_amount


def build_weapon_table(name: str, report: WeaponReport) -> Table:
    """
    Builds the table of one weapon.

    Rows follow the damage types in the order they were first seen, with
    the total last.

    Args:
        name (str): The weapon name.
        report (WeaponReport): The weapon statistics.

    Returns:
        Table: The table, one row per damage type.

    """
    damage_types: list[str] = []
    for averages in (report.max_damage, report.crit_average, report.average):
        for damage_type in averages:
            if damage_type != TOTAL_DAMAGE and damage_type not in damage_types:
                damage_types.append(damage_type)
    damage_types.append(TOTAL_DAMAGE)

    table = Table(title=escape(name), pad_edge=False)
    table.add_column("Damage Type", style="bold")
    table.add_column("Max", style="red", justify="right")
    table.add_column("Avg Crits", style="magenta", justify="right")
    table.add_column("Avg", style="green", justify="right")
    for damage_type in damage_types:
        table.add_row(
            escape(damage_type),
            format_amount(report.max_damage.get(damage_type, 0.0)),
            format_amount(report.crit_average.get(damage_type, 0.0)),
            format_amount(report.average.get(damage_type, 0.0)),
            style="bold" if damage_type == TOTAL_DAMAGE else None,
        )
    table.caption = f"Crit Percent {format_amount(report.crit_rate_percent)} %"
    return table


def render_report(stats: Stats) -> None:
    """
    Prints the analysis report of every registered weapon.

    Args:
        stats (Stats): The aggregator, after at least one run.

    """
    reports = stats.report()
    crule("Weapon Statistics", style="bold green")
    cprint(f"Iterations: {stats.iterations}", style="bold")
    for name, report in reports.items():
        cprint(f"[dim]{escape(str(stats.weapons[name]))}[/]")
        cprint(build_weapon_table(name, report))
        crule(style="dim", characters="=")
