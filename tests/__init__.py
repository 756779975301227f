"""Test package for the countdown overlay.

Timer and render-policy tests run against a ``FakeClock`` and a recording
canvas and need no display. Tests that touch pygame use SDL's dummy video
driver so no real window is opened. Run ``pytest`` from the project root.
"""
