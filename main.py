#!/usr/bin/env python3
"""
Landlord Compliance Engine - Entry Point

Works out MTD for Income Tax status, late penalties, EPC upgrade plans,
compliance deadlines and readiness scores for UK landlords.

Usage:
    python main.py mtd --rental-income 42000 --self-employment 12000
    python main.py penalty --amount 2400 --days-late 45
    python main.py epc --score 58 --budget 1000
    python main.py --as-of 2026-06-01 deadlines --certificates certs.csv --upcoming
    python main.py score --file checklist.csv --export-json score.json
    python main.py rent-increase --current 1200 --proposed 1290 --effective-date 2026-09-01
"""

from compliance_engine.cli import main

if __name__ == "__main__":
    main()
