"""
gridtrace: overlay adjustable row/column grids on a pasted reference
image to transcribe it into a chart.
"""
__version__ = "0.1.0"
