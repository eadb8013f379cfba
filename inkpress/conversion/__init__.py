"""Conversion package

Use cases that drive the page pipeline over a document: the preview matrix
and the full-document converter, plus their ports and the default PDF
assembler.
"""
