"""
LegalPro Lite - Legal Practice Management Service
=================================================

A compact service for:
1. Tracking cases, hearings, clients, invoices, time entries and documents
2. Detecting hearing conflicts and generating hearing reminders

Every record is scoped to the user who created it.
"""

__version__ = "1.0.0"
