"""
Sections: named categories that group products.
"""
