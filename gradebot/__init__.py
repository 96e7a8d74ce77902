"""
gradebot

Writes autograding results into a Google Sheets gradebook.
"""
__version__ = "0.1.0"
