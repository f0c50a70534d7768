"""
Analysis pipelines for the HLA contact package.
"""
