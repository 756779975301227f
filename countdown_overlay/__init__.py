"""Borderless always-on-top countdown overlay.

Run with ``python -m countdown_overlay``; press R to restart the countdown.
"""
