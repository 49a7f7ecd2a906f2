"""
oc-mirror command line interface.
"""
