"""formapp — form submission API (server and gateway-handler variants).

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
