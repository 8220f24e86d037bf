"""Broker integration — mirroring the catalog to a remote registry service.

The remote broker is used opportunistically: every call is wrapped into an
``Outcome`` so callers can fall back to the local catalog explicitly.
"""
