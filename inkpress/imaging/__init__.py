"""Imaging package

Per-page binarization stages (luminance, Otsu, contrast, soft threshold,
speckle cleanup), the page pipeline that sequences them, and the pypdfium2
rasterization adapter.
"""
