"""
Core cross-cutting definitions (error hierarchy).
"""
