"""
Rendering: shaded sphere layer, 2D overlay painter and background asset
loading.
"""
