"""
Happy-moment text pipeline: cleaning, stem completion, demographic joins and
descriptive statistics over the HappyDB corpus.
"""

__version__ = "0.1.0"
