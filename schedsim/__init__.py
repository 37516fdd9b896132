"""
Scheduling simulator package.

Simulates classic CPU scheduling algorithms (FCFS, Round Robin, Priority,
Dynamic Priority with aging, SJF) over a synthetic process set and reports
waiting and turnaround times.
"""

__all__ = ["algorithms", "cli"]
