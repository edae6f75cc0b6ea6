"""
Configuration layer: settings loaded from the environment and logging setup.
"""
