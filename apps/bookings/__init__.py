"""Bookings app package.

This app encapsulates the booking lifecycle of car rentals and transfers:
request validation, reference codes, the status state machine with its
field mutability rules, and the command handlers that publish booking
domain events. Persistence and the HTTP layer belong to the surrounding
service.
"""
