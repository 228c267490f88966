"""Design-space exploration for SRM Pro.

Parameter sweeps and Monte Carlo dispersion built on top of the stateless
solvers in :mod:`srm_pro.core`.
"""
