"""Pricing app package.

This app resolves what a car or listing costs for a given calendar date:
base daily/weekly/monthly rates, seasonal overrides stored in mixed date
notations, rental quotes over a whole pickup-to-dropoff duration and the
admin-side audit of seasonal rules.
"""
