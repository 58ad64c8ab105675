"""
Interface package: communication protocols for the chess engine.

Modules:
    protocol: UCI line decoding into command values, response encoding.
    config:   Engine mode, startup settings and logging setup.
    uci:      UCI session handler and the stdin/stdout loop.
              Can be run as a standalone script: python interface/uci.py
"""
