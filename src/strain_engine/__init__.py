"""Strain Engine — keys-mode strain rating solver.

Sub-package containing:
    lookup_tables      – lane → hand / finger tables per key mode
    event_adapter      – hit objects with resolved hand, finger and rate
    clustering         – same-hand chords and cross-hand pairing
    wrist_lift         – per-hand wrist lift chains
    cluster_evaluator  – intrinsic difficulty of one hand state
    strain_aggregator  – stamina recurrence and per-hand strain
    solver             – orchestrates the passes per key mode
    constants          – YAML-backed strain constants
    qua_parser         – ``.qua`` map loading
    report             – rates map files and exports JSON reports
"""
