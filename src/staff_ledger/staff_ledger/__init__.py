"""Staff Ledger package.

Time-and-attendance, leave and shift scheduling core for a single-site staff
panel. Organized by feature modules (attendance, corrections, leaves,
shifts, stats) with a thin Flask controller layer over service/repository
layers.
"""
