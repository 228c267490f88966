"""Core calculation modules for SRM Pro.

This package contains the engineering calculation engine:
- motor: Motor requirements from target apogee or thrust
- grain: Burning area, chamber-pressure equilibrium and grain performance
- structural: Case stresses, bulkhead, retaining screws and nozzle areas
- aero: Barrowman stability, drag build-up and apogee estimate
- materials: Structural material strengths
- errors: Engine error taxonomy
"""
