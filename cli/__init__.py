"""
Command Line Tools
"""
