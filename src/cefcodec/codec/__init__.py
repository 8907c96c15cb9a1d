"""
Codec layers for cefcodec.

Leaf-first: coercion, timestamps, extensions, payload, header, record.
Import the submodules directly; the public API is re-exported by the
top-level ``cefcodec`` package.
"""
