"""Faction AI Inspector

A small web API that exposes influence maps, threat assessments and ranked
candidate actions for a posted sector snapshot. Intended for debug overlays.

Usage:
    python -m faction_ai.inspector.run

Then query http://localhost:8000/api/...
"""
