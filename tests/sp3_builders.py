"""Builders for fixed-column SP3 test lines."""

from __future__ import annotations


def header_lines(satellites: list[str], accuracies: list[int], time_system: str = "GPS") -> list[str]:
    """Minimal SP3-d header for the given satellites."""
    lines = [
        "#dP2020  1  1  0  0  0.00000000       2 ORBIT IGS14 HLM  TST",
        "## 2086 259200.00000000    60.00000000 58849 0.0000000000000",
    ]
    padded = satellites + ["  0"] * (17 - len(satellites))
    lines.append(f"+  {len(satellites):3d}   " + "".join(padded))
    padded_acc = accuracies + [0] * (17 - len(accuracies))
    lines.append("++       " + "".join(f"{a:3d}" for a in padded_acc))
    lines.append(time_system_line(time_system))
    lines.append("%c cc cc ccc ccc cccc cccc cccc cccc ccccc ccccc ccccc ccccc")
    lines.append("%f  1.2500000  1.025000000  0.00000000000  0.000000000000000")
    lines.append("%i    0    0    0    0      0      0      0      0         0")
    lines.append("/* test file")
    return lines


def time_system_line(tag: str) -> str:
    return f"%c L  cc {tag:3s} ccc cccc cccc cccc cccc ccccc ccccc ccccc ccccc"


def epoch_line(year: int, month: int, day: int, hour: int = 0, minute: int = 0, second: float = 0.0) -> str:
    return f"*  {year:4d} {month:2d} {day:2d} {hour:2d} {minute:2d} {second:11.8f}"


def position_line(sat: str, x: float, y: float, z: float, clock: float = 999999.999999) -> str:
    """Position in km, clock in microseconds."""
    return f"P{sat:3s}{x:14.6f}{y:14.6f}{z:14.6f}{clock:14.6f}"


def velocity_line(sat: str, vx: float, vy: float, vz: float, rate: float = 999999.999999) -> str:
    """Velocity in dm/s."""
    return f"V{sat:3s}{vx:14.6f}{vy:14.6f}{vz:14.6f}{rate:14.6f}"


def covariance_line(
    xx: int, yy: int, zz: int, xy: int = 0, xz: int = 0, yz: int = 0, cc: int = 0
) -> str:
    """EP line: std devs in mm, correlations in 1e-7."""
    return (
        f"EP  {xx:4d} {yy:4d} {zz:4d} {cc:7d} {xy:8d} {xz:8d} {0:8d} {yz:8d} {0:8d} {0:8d}"
    )


def sp3_text(lines: list[str]) -> str:
    return "\n".join(lines) + "\n"
