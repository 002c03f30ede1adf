"""
Products: priced items, each belonging to exactly one section.
"""
