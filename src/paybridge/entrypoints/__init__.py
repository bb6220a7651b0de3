"""Entrypoints layer - Delivery mechanisms.

Entrypoints translate external requests into use case calls
and format responses for the delivery mechanism. The HTTP handlers here are
framework-agnostic; routing belongs to the hosting web application.
"""
