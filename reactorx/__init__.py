"""ReactorX: staged adiabatic reactor design for reversible exothermic reactions.

This package provides:
- Thermo: equilibrium constant, equilibrium and energy-balance conversions
- Models: validated reaction parameters and derived coefficients
- Solver: damped Newton stage intersection and multi-stage intercooled loop
- Analytics: conversion curves, stage tables and intercooler duties
- Settings: solver constants configurable through REACTORX_* variables
"""

__version__ = "0.1.0"
