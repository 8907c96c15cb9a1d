"""
Command line interface for cefcodec.
"""
