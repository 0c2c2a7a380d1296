"""
Pathway Quest Application Package

This package contains the core application modules including:
- auth: Authentication and session resolution
- core: Onboarding gate, streak rules and the invite saga
- db: Database client and record types
- services: Per-feature services (tasks, teams, partners, notifications, ...)
- api: Public JSON API and websocket fan-out
"""

__version__ = "1.0.0"
