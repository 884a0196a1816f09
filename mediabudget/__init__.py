"""
MediaBudget - SOV/SOM Budget Planner for Developing & Emerging Markets.

Derives a next-year media budget from share-of-market targets using a
fixed SOV/SOM ratio table, and exports the plan as a PDF report.

Version: 0.1.0
"""

__version__ = "0.1.0"
__author__ = "MediaBudget Team"
