"""Academic planning package.

Organized by feature modules (periods, programs, activities, indicators,
results, ...) with a thin Flask controller layer over service/repository layers.
"""
