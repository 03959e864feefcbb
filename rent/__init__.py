"""
Rent dues ledger and revenue reports.
"""
