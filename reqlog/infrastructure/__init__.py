"""Infrastructure Package

This package contains infrastructure layer components: the structured
logging facade and its structlog-backed engine.
"""
