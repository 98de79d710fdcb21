"""
proto-emitter: file-emission core of a protobuf-driven Go source generator.
"""

__version__ = "0.1.0"
