"""
Core functionality for the video summarizer.

This package contains modules for fetching transcripts, chunking them,
summarizing chunks and orchestrating the whole pipeline.
"""
