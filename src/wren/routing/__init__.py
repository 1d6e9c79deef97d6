"""Routing: ordered route table with segment-count-gated matching.

Routes are registered during setup and matched in registration order
(first match wins) at dispatch time.
"""
