"""Derived-data engine for personal biomarker tracking.

This package turns flat lab records (markers, measurements, notes, plans and
todos) into the view model a dashboard renders. Everything here is pure and
recomputed from its inputs; persistence and rendering live elsewhere.
"""
