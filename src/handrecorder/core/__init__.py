"""Shared primitives: seat/street constants, cards, the stored record schema and feature flags."""
