"""Pricing bounded context: order pricing and delivery estimation."""
