"""
BrandLens CLI
"""
